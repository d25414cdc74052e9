"""Exceptions raised by coachmatch."""


class CoachMatchError(Exception):
    """Base class for coachmatch errors."""


class RoleMismatchError(CoachMatchError, TypeError):
    """Raised when a pair is not one instructor and one learner."""


class UnknownRoleError(CoachMatchError, ValueError):
    """Raised when a record carries a role spelling we do not recognize."""


class ProfileLoadError(CoachMatchError):
    """Raised when a profile export cannot be read or a record is invalid."""


class ProfileNotFoundError(CoachMatchError, KeyError):
    """Raised when a profile id is not present in the loaded population."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class ConfigError(CoachMatchError, ValueError):
    """Raised when a COACHMATCH_* environment variable holds an invalid value."""
