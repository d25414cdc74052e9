from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .data_models import InstructorProfile, LearnerProfile, MatchResult, RankTier
from .errors import RoleMismatchError


@dataclass(frozen=True)
class ScoreWeights:
    w_muscle: int = 15
    w_gym: int = 25
    w_day: int = 8
    w_time: int = 20
    w_experience: int = 10
    experience_threshold: int = 3


# Evaluated top-down; the first threshold the score reaches wins.
RANK_THRESHOLDS: Tuple[Tuple[int, RankTier], ...] = (
    (70, RankTier.EXCELLENT),
    (50, RankTier.GOOD),
    (30, RankTier.FAIR),
)


def rank_for_score(score: int) -> RankTier:
    for threshold, tier in RANK_THRESHOLDS:
        if score >= threshold:
            return tier
    return RankTier.LOW


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def score_pair(
    instructor: InstructorProfile,
    learner: LearnerProfile,
    weights: Optional[ScoreWeights] = None,
) -> MatchResult:
    """Score one instructor/learner pair.

    Contributions, in evaluation order:
    1. learner target muscles covered by instructor specialties (per match)
    2. same gym
    3. shared available days (per day)
    4. same time band
    5. instructor experience at or above the threshold

    Only strictly positive contributions produce a detail line, so ``details``
    follows the order above with the zero factors left out.

    Raises:
        RoleMismatchError: the arguments are not an instructor then a learner.
    """
    if not isinstance(instructor, InstructorProfile) or not isinstance(learner, LearnerProfile):
        raise RoleMismatchError(
            "score_pair expects (instructor, learner), got "
            f"({getattr(instructor, 'role', type(instructor).__name__)}, "
            f"{getattr(learner, 'role', type(learner).__name__)})"
        )
    if weights is None:
        weights = ScoreWeights()

    score = 0
    details: List[str] = []

    muscle_matches = len(learner.target_muscles & instructor.specialties)
    muscle_score = muscle_matches * weights.w_muscle
    if muscle_score > 0:
        score += muscle_score
        details.append(f"{_plural(muscle_matches, 'target muscle group')} matched +{muscle_score} pts")

    if weights.w_gym > 0 and instructor.gym is not None and instructor.gym == learner.gym:
        score += weights.w_gym
        details.append(f"Same gym +{weights.w_gym} pts")

    day_matches = len(learner.available_days & instructor.available_days)
    day_score = day_matches * weights.w_day
    if day_score > 0:
        score += day_score
        details.append(f"{_plural(day_matches, 'available day')} in common +{day_score} pts")

    if weights.w_time > 0 and instructor.available_time is not None and instructor.available_time == learner.available_time:
        score += weights.w_time
        details.append(f"Same time slot +{weights.w_time} pts")

    if weights.w_experience > 0 and (instructor.experience or 0) >= weights.experience_threshold:
        score += weights.w_experience
        details.append(f"Experienced instructor +{weights.w_experience} pts")

    return MatchResult(score=score, rank=rank_for_score(score), details=tuple(details))
