from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd
from pydantic import ValidationError

from .data_models import InstructorProfile, LearnerProfile, parse_profile
from .errors import ProfileLoadError, ProfileNotFoundError, UnknownRoleError


logger = logging.getLogger(__name__)

AnyProfile = Union[InstructorProfile, LearnerProfile]

FIELD_ALIASES: Dict[str, List[str]] = {
    "id": ["id", "uid", "user_id", "userId", "User ID"],
    "role": ["role", "Role", "Which role are you signing up for?"],
    "name": ["name", "Name", "displayName", "Your name"],
    "gym": ["gym", "Gym", "Which gym do you train at?"],
    "specialties": ["specialties", "Specialties", "What muscle groups do you specialize in?"],
    "experience": ["experience", "Experience", "Years of coaching experience"],
    "target_muscles": ["target_muscles", "targetMuscles", "Which muscle groups do you want to train?"],
    "available_days": ["available_days", "availableDays", "Available days"],
    "available_time": ["available_time", "availableTime", "Preferred time of day"],
    "goals": ["goals", "Goals"],
    "level": ["level", "Level"],
    "bio": ["bio", "Bio", "Tweet-sized summary of yourself"],
}


def get_alias_column(df: pd.DataFrame, key: str) -> Optional[str]:
    for candidate in FIELD_ALIASES.get(key, []):
        if candidate in df.columns:
            return candidate
    return None


def resolve_aliases(df: pd.DataFrame) -> Dict[str, Optional[str]]:
    return {key: get_alias_column(df, key) for key in FIELD_ALIASES}


def clean_profiles_df(df: pd.DataFrame) -> pd.DataFrame:
    """Whitespace cleanup, blank-to-null, and renaming of known columns to canonical names.

    Columns with no alias entry are kept under their original (stripped) name.
    """
    out = df.copy()
    out.columns = [col.strip() if isinstance(col, str) else col for col in out.columns]
    for col in out.columns:
        if pd.api.types.is_object_dtype(out[col]) or pd.api.types.is_string_dtype(out[col]):
            out[col] = (
                out[col]
                .astype(str)
                .str.replace("\n", " ")
                .str.replace(r"\s+", " ", regex=True)
                .str.strip()
                .replace({"nan": None, "None": None, "": None})
            )
    renames = {col: key for key, col in resolve_aliases(out).items() if col is not None and col != key}
    return out.rename(columns=renames)


def _frame_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    # Empty cells are dropped so each record only carries the fields its row filled in.
    rows = df.astype(object).where(pd.notna(df), None).to_dict(orient="records")
    return [{k: v for k, v in row.items() if v is not None} for row in rows]


def _read_json_records(path: Path) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise ProfileLoadError(f"Malformed JSON in {path}: {e}") from e
    if isinstance(payload, dict):
        payload = payload.get("users", payload.get("profiles"))
    if not isinstance(payload, list):
        raise ProfileLoadError(f"Expected a list of profiles (or a 'users'/'profiles' list) in {path}")
    for i, record in enumerate(payload):
        if not isinstance(record, dict):
            raise ProfileLoadError(f"Profile record {i} in {path} is not an object: {record!r}")
    return [dict(r) for r in payload]


def read_profile_records(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read raw records from a ``.csv`` or ``.json`` export."""
    path = Path(path)
    if not path.exists():
        raise ProfileLoadError(f"Profile export not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".csv":
        # Read everything as text; ids such as "007" must survive.
        df = pd.read_csv(path, dtype=str)
        return _frame_records(clean_profiles_df(df))
    if suffix == ".json":
        return _read_json_records(path)
    raise ProfileLoadError(f"Unsupported profile export format: {path.suffix or path.name}")


def _parse_record(record: Any) -> AnyProfile:
    if not isinstance(record, Mapping):
        raise ProfileLoadError(f"expected a mapping, got {type(record).__name__}")
    return parse_profile(record)


def parse_profiles(
    records: Iterable[Dict[str, Any]],
    skip_invalid: bool = False,
) -> List[AnyProfile]:
    """Validate records into profiles.

    Raises:
        ProfileLoadError: a record is invalid (unless ``skip_invalid``) or an id repeats.
    """
    profiles: List[AnyProfile] = []
    seen: Dict[str, int] = {}
    for i, record in enumerate(records):
        try:
            profile = _parse_record(record)
        except (ProfileLoadError, UnknownRoleError, ValidationError) as e:
            if skip_invalid:
                logger.warning("Skipping invalid profile record %d: %s", i, e)
                continue
            raise ProfileLoadError(f"Invalid profile record {i}: {e}") from e
        if profile.id in seen:
            raise ProfileLoadError(
                f"Duplicate profile id {profile.id!r} in records {seen[profile.id]} and {i}"
            )
        seen[profile.id] = i
        profiles.append(profile)
    logger.debug("Parsed %d profiles", len(profiles))
    return profiles


def load_profiles(path: Union[str, Path], skip_invalid: bool = False) -> List[AnyProfile]:
    """Load and validate every profile in a ``.csv`` or ``.json`` export."""
    return parse_profiles(read_profile_records(path), skip_invalid=skip_invalid)


def find_profile(profiles: Iterable[AnyProfile], profile_id: str) -> AnyProfile:
    for profile in profiles:
        if profile.id == profile_id:
            return profile
    raise ProfileNotFoundError(f"No profile with id {profile_id!r}")
