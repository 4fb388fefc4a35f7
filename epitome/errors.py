"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from EpitomeUserError.

Recoverable rendering problems (missing partials, unresolved paths,
unmatched tags) are NOT exceptions: they are logged and rendered as
empty output.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class EpitomeUserError(Exception):
    """
    Base class for all user-facing errors in Epitome.

    These errors indicate problems that the user can fix:
    configuration issues, missing layout templates, etc.
    """
    pass


class TemplateNotFoundError(EpitomeUserError):
    """Top-level (layout) template is missing or unreadable."""

    def __init__(self, name: str, path: Path, cause: Optional[Exception] = None):
        super().__init__(f"Template '{name}' not found or unreadable: {path}")
        self.name = name
        self.path = path
        self.cause = cause


class ConfigError(EpitomeUserError):
    """Invalid engine configuration."""
    pass


__all__ = ["EpitomeUserError", "TemplateNotFoundError", "ConfigError"]
