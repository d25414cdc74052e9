from __future__ import annotations

import logging

from rich.logging import RichHandler


def configure_logging(level: str = "WARNING") -> None:
    """Route coachmatch log records through rich at ``level``."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
