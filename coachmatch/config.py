from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError


ENV_PREFIX = "COACHMATCH_"
LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseModel):
    """
    Runtime settings read from ``COACHMATCH_*`` environment variables.

    Fields:
        profiles_path: Default profile export for CLI commands.
        top_k: Number of candidates to show; 0 shows all.
        log_level: Standard logging level name.
    """

    profiles_path: Optional[Path] = None
    top_k: int = Field(default=15, ge=0)
    log_level: str = "WARNING"


def load_settings(environ: Optional[Mapping[str, str]] = None, dotenv_path: Optional[Path] = None) -> Settings:
    """Build ``Settings`` from the environment, loading a ``.env`` file first.

    Raises:
        ConfigError: a variable is set to a value that does not validate.
    """
    if environ is None:
        load_dotenv(dotenv_path)
        environ = os.environ

    values = {}
    for field in Settings.model_fields:
        raw = environ.get(f"{ENV_PREFIX}{field.upper()}")
        if raw is not None and raw.strip():
            values[field] = raw.strip()

    if "log_level" in values:
        level = values["log_level"].upper()
        if level not in LOG_LEVELS:
            raise ConfigError(f"{ENV_PREFIX}LOG_LEVEL must be one of {sorted(LOG_LEVELS)}, got {values['log_level']!r}")
        values["log_level"] = level

    try:
        return Settings(**values)
    except ValidationError as e:
        bad = ", ".join(f"{ENV_PREFIX}{str(err['loc'][0]).upper()}" for err in e.errors())
        raise ConfigError(f"Invalid configuration in {bad}: {e}") from e
