from __future__ import annotations

import math
import re
from enum import Enum
from typing import Annotated, Any, FrozenSet, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from .errors import UnknownRoleError


Role = Literal["instructor", "learner"]

# Store spellings seen in exports, mapped onto the two canonical roles.
ROLE_ALIASES = {
    "instructor": "instructor",
    "trainer": "instructor",
    "coach": "instructor",
    "learner": "learner",
    "beginner": "learner",
    "trainee": "learner",
}

# Option vocabularies offered by the profile setup form.
MUSCLE_GROUPS = ["chest", "back", "legs", "shoulders", "arms", "abs"]
WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
TIME_BANDS = ["morning", "midday", "evening", "night"]
GOALS = ["bulk up", "lose weight", "get stronger", "stay healthy", "body shaping"]
LEVELS = ["beginner", "intermediate", "advanced"]

_TAG_SPLIT = re.compile(r"[,;|]")
_LEADING_INT = re.compile(r"^\s*(\d+)")


def normalize_role(value: Any) -> Role:
    """Map a store role spelling onto ``"instructor"`` or ``"learner"``."""
    key = str(value or "").strip().lower()
    if key not in ROLE_ALIASES:
        raise UnknownRoleError(f"Unknown role: {value!r}")
    return ROLE_ALIASES[key]  # type: ignore[return-value]


def opposite_role(role: Role) -> Role:
    return "learner" if role == "instructor" else "instructor"


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _as_tag_set(value: Any) -> FrozenSet[str]:
    """Absent -> empty set; delimited text or a list/tuple/set -> set of stripped tags."""
    if _is_missing(value):
        return frozenset()
    if isinstance(value, str):
        items = _TAG_SPLIT.split(value)
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = list(value)
    else:
        raise ValueError(f"expected a list of tags or delimited text, got {type(value).__name__}")
    return frozenset(str(v).strip() for v in items if not _is_missing(v) and str(v).strip())


def _as_optional_text(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    text = str(value).strip()
    return text or None


def _as_years(value: Any) -> Optional[int]:
    # Same reading as parseInt: the leading integer counts, anything else is absent.
    if _is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, float) and math.isinf(value):
        raise ValueError("experience must be a finite number of years")
    if isinstance(value, (int, float)):
        return int(value)
    if not isinstance(value, str):
        raise ValueError(f"expected a number of years, got {type(value).__name__}")
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


class ProfileBase(BaseModel):
    """
    Fields shared by both roles.

    Every optional attribute is normalized on the way in: absent collections
    become empty sets and blank scalars become ``None``. Scoring code can
    therefore intersect and compare without checking for presence.
    Unrecognized store fields (name, bio, goals, ...) are kept as extras.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    gym: Optional[str] = None
    available_days: FrozenSet[str] = Field(default_factory=frozenset, alias="availableDays")
    available_time: Optional[str] = Field(default=None, alias="availableTime")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return str(value).strip() if isinstance(value, (int, str)) else value

    @field_validator("gym", "available_time", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Optional[str]:
        return _as_optional_text(value)

    @field_validator("available_days", mode="before")
    @classmethod
    def days_to_set(cls, value: Any) -> FrozenSet[str]:
        return _as_tag_set(value)


class InstructorProfile(ProfileBase):
    role: Literal["instructor"] = "instructor"
    specialties: FrozenSet[str] = Field(default_factory=frozenset)
    experience: Optional[int] = Field(default=None, ge=0)

    @field_validator("specialties", mode="before")
    @classmethod
    def specialties_to_set(cls, value: Any) -> FrozenSet[str]:
        return _as_tag_set(value)

    @field_validator("experience", mode="before")
    @classmethod
    def parse_experience(cls, value: Any) -> Optional[int]:
        return _as_years(value)


class LearnerProfile(ProfileBase):
    role: Literal["learner"] = "learner"
    target_muscles: FrozenSet[str] = Field(default_factory=frozenset, alias="targetMuscles")

    @field_validator("target_muscles", mode="before")
    @classmethod
    def targets_to_set(cls, value: Any) -> FrozenSet[str]:
        return _as_tag_set(value)


Profile = Annotated[Union[InstructorProfile, LearnerProfile], Field(discriminator="role")]

_PROFILE_ADAPTER: TypeAdapter = TypeAdapter(Profile)


def parse_profile(record: Mapping[str, Any]) -> Union[InstructorProfile, LearnerProfile]:
    """Validate one store record into the profile model matching its role.

    Raises:
        UnknownRoleError: the role is missing or not a known spelling.
        pydantic.ValidationError: the record is otherwise malformed.
    """
    data = dict(record)
    data["role"] = normalize_role(data.get("role"))
    return _PROFILE_ADAPTER.validate_python(data)


class RankTier(str, Enum):
    """Qualitative compatibility labels, best first."""

    EXCELLENT = "excellent compatibility"
    GOOD = "good compatibility"
    FAIR = "fair compatibility"
    LOW = "low compatibility"

    @property
    def badge(self) -> str:
        return _BADGES[self]


_BADGES = {
    RankTier.EXCELLENT: "🔥",
    RankTier.GOOD: "✨",
    RankTier.FAIR: "👍",
    RankTier.LOW: "🤔",
}


class MatchResult(BaseModel):
    """
    Outcome of scoring one instructor/learner pair.

    Fields:
        score: Sum of the triggered contributions, never negative.
        rank: Tier derived from the score.
        details: One line per positive contribution, in evaluation order.
    """

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0)
    rank: RankTier
    details: Tuple[str, ...] = ()
