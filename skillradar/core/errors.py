"""
skillradar exception hierarchy.

Provides a base exception class with user-facing messages and debug context,
plus specialized subclasses for different error domains.

None of these escape the public API: the codec reports them as a
DecodeResult and the repository logs them and continues in memory.
"""

from typing import Any, Dict, Optional


class SkillRadarError(Exception):
    """Base exception for skillradar errors.

    Attributes:
        user_message: Safe, user-facing error message.
        context: Dictionary of debug information.
    """

    def __init__(
        self,
        message: str,
        *,
        user_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.user_message = user_message or message
        self.context = context or {}


class SnapshotError(SkillRadarError):
    """Snapshot token is malformed, truncated or not a skill payload."""

    pass


class PersistenceError(SkillRadarError):
    """Persisted state could not be read or written."""

    pass
