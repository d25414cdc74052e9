"""Generate synthetic instructor/learner populations.

Values are drawn from the same option vocabularies the profile form offers,
so generated exports exercise every scoring factor.
"""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd
import shortuuid

from .data_models import (
    GOALS,
    LEVELS,
    MUSCLE_GROUPS,
    TIME_BANDS,
    WEEKDAYS,
    InstructorProfile,
    LearnerProfile,
)
from .errors import ProfileLoadError


AnyProfile = Union[InstructorProfile, LearnerProfile]

GYMS = ["Iron Temple", "Northside Fitness", "Harbor Strength Club", "Peak Performance"]
FIRST_NAMES = ["Aoi", "Ren", "Mika", "Sora", "Kai", "Yui", "Haru", "Noa", "Riku", "Emi"]
LAST_NAMES = ["Sato", "Suzuki", "Tanaka", "Ito", "Kato", "Mori", "Ono", "Abe"]

# Column order for CSV exports; list-valued fields are joined with ';'.
EXPORT_COLUMNS = [
    "id",
    "role",
    "name",
    "gym",
    "specialties",
    "experience",
    "target_muscles",
    "available_days",
    "available_time",
    "goals",
    "level",
]


def _sample(rng: random.Random, options: List[str], low: int, high: int) -> List[str]:
    k = rng.randint(low, min(high, len(options)))
    return sorted(rng.sample(options, k), key=options.index)


def generate_profiles(
    count: int,
    seed: Optional[int] = None,
    instructor_share: float = 0.4,
) -> List[AnyProfile]:
    """Build ``count`` profiles; the same seed always yields the same population."""
    if count < 0:
        raise ValueError("count must be non-negative")
    if not 0.0 <= instructor_share <= 1.0:
        raise ValueError("instructor_share must be between 0 and 1")

    rng = random.Random(seed)
    n_instructors = round(count * instructor_share)
    profiles: List[AnyProfile] = []
    for i in range(count):
        if seed is None:
            profile_id = shortuuid.uuid()[:10]
        else:
            # Name-based ids are deterministic for a given seed and index.
            profile_id = shortuuid.uuid(name=f"coachmatch-{seed}-{i}")[:10]
        common: Dict[str, Any] = {
            "id": profile_id,
            "name": f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
            # Leave some fields unset so partial profiles show up too.
            "gym": rng.choice(GYMS) if rng.random() > 0.1 else None,
            "available_days": _sample(rng, WEEKDAYS, 0, 4),
            "available_time": rng.choice(TIME_BANDS) if rng.random() > 0.15 else None,
        }
        if i < n_instructors:
            profiles.append(
                InstructorProfile(
                    **common,
                    specialties=_sample(rng, MUSCLE_GROUPS, 1, 3),
                    experience=rng.randint(0, 12),
                )
            )
        else:
            profiles.append(
                LearnerProfile(
                    **common,
                    target_muscles=_sample(rng, MUSCLE_GROUPS, 1, 3),
                    goals=_sample(rng, GOALS, 1, 2),
                    level=rng.choice(LEVELS),
                )
            )
    return profiles


def _export_row(profile: AnyProfile) -> Dict[str, Any]:
    row = profile.model_dump()
    for key, value in row.items():
        if isinstance(value, (set, frozenset)):
            row[key] = sorted(value)
    return row


def write_profiles(profiles: List[AnyProfile], path: Union[str, Path]) -> Path:
    """Write profiles to ``.csv`` (one row each) or ``.json`` (a ``users`` list)."""
    path = Path(path)
    rows = [_export_row(p) for p in profiles]
    suffix = path.suffix.lower()
    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".json":
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"users": rows}, f, ensure_ascii=False, indent=2)
    elif suffix == ".csv":
        df = pd.DataFrame(rows).reindex(columns=EXPORT_COLUMNS)
        for col in df.columns:
            df[col] = df[col].apply(lambda v: ";".join(v) if isinstance(v, list) else v)
        df.to_csv(path, index=False)
    else:
        raise ProfileLoadError(f"Unsupported profile export format: {path.suffix or path.name}")
    return path
