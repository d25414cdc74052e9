from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict

from .data_models import (
    InstructorProfile,
    LearnerProfile,
    MatchResult,
    Profile,
    RankTier,
    opposite_role,
    parse_profile,
)
from .scoring import ScoreWeights, score_pair


logger = logging.getLogger(__name__)

AnyProfile = Union[InstructorProfile, LearnerProfile]

RANKING_COLUMNS = ["position", "id", "name", "role", "gym", "score", "rank", "details"]


class RankedCandidate(BaseModel):
    """A candidate profile (copied, never the caller's instance) plus its match result."""

    model_config = ConfigDict(frozen=True)

    profile: Profile
    match: MatchResult

    @property
    def id(self) -> str:
        return self.profile.id

    @property
    def score(self) -> int:
        return self.match.score

    @property
    def rank(self) -> RankTier:
        return self.match.rank

    @property
    def details(self) -> List[str]:
        return list(self.match.details)

    def to_record(self) -> Dict[str, Any]:
        """Flatten to the candidate's own fields plus ``score``, ``rank`` and ``details``.

        Set-valued fields are emitted as sorted lists under their store (camelCase) keys.
        """
        record = self.profile.model_dump(by_alias=True)
        for key, value in record.items():
            if isinstance(value, (set, frozenset)):
                record[key] = sorted(value)
        record["score"] = self.match.score
        record["rank"] = self.match.rank.value
        record["details"] = list(self.match.details)
        return record


def _pair_for(me: AnyProfile, candidate: AnyProfile) -> Tuple[InstructorProfile, LearnerProfile]:
    # Instructor always goes first, whichever side is acting.
    if isinstance(me, InstructorProfile):
        return me, candidate
    return candidate, me


def rank_candidates(
    me: AnyProfile,
    population: Iterable[AnyProfile],
    weights: Optional[ScoreWeights] = None,
    top_k: Optional[int] = None,
) -> List[RankedCandidate]:
    """Rank every opposite-role profile in ``population`` against ``me``.

    Pseudocode:
    1. Target role is the complement of ``me.role``.
    2. Keep profiles with the target role and an id different from ``me.id``.
    3. Score each pair with the instructor argument first.
    4. Attach the result to a deep copy of the candidate.
    5. Sort by score descending, then id ascending, and cut to ``top_k`` if given.

    An empty candidate set yields an empty list.
    """
    target_role = opposite_role(me.role)
    candidates = [p for p in population if p.role == target_role and p.id != me.id]
    if not candidates:
        logger.info("No %s candidates for %s", target_role, me.id)
        return []

    logger.debug("Scoring %d %s candidates for %s", len(candidates), target_role, me.id)
    ranked: List[RankedCandidate] = []
    for candidate in candidates:
        instructor, learner = _pair_for(me, candidate)
        result = score_pair(instructor, learner, weights)
        ranked.append(RankedCandidate(profile=candidate.model_copy(deep=True), match=result))

    ranked.sort(key=lambda r: (-r.match.score, r.profile.id))
    if top_k is not None and top_k > 0:
        ranked = ranked[:top_k]
    return ranked


def rank_records(
    me_record: Mapping[str, Any],
    records: Iterable[Mapping[str, Any]],
    weights: Optional[ScoreWeights] = None,
    top_k: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Store-facing wrapper: plain records in, flattened ranked records out."""
    me = parse_profile(me_record)
    population = [parse_profile(r) for r in records]
    return [r.to_record() for r in rank_candidates(me, population, weights=weights, top_k=top_k)]


def ranking_frame(ranked: List[RankedCandidate]) -> pd.DataFrame:
    """Tabulate a ranking, one row per candidate in ranked order."""
    rows = []
    for position, r in enumerate(ranked, start=1):
        extras = r.profile.model_extra or {}
        rows.append(
            {
                "position": position,
                "id": r.id,
                "name": extras.get("name") or "",
                "role": r.profile.role,
                "gym": r.profile.gym or "",
                "score": r.score,
                "rank": r.rank.value,
                "details": "; ".join(r.match.details),
            }
        )
    return pd.DataFrame(rows, columns=RANKING_COLUMNS)
