# skillradar/common/settings.py
#
# Frozen dataclass for application settings plus the type-safe converters
# used wherever loosely typed JSON or user input enters the core.

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

# Recognized bool strings
_TRUE_STRINGS = frozenset({"true", "1", "yes"})
_FALSE_STRINGS = frozenset({"false", "0", "no"})

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

SETTINGS_SECTION = "settings"


# =============================================================================
# Helper Functions
# =============================================================================


def safe_int(value: Any, default: int) -> int:
    """int conversion. None/bool/float/failed conversion return default.

    Note:
        bool is a subclass of int but intentionally returns default so that
        True/False never turn into 1/0. float also returns default to avoid
        silent truncation.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def safe_float(value: Any, default: float) -> float:
    """float conversion. None/bool/failed conversion return default."""
    if value is None:
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def safe_bool(value: Any, default: bool = False) -> bool:
    """bool conversion. Unrecognized strings return default (typo guard)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        if not value:
            return default
        lower = value.lower()
        if lower in _TRUE_STRINGS:
            return True
        if lower in _FALSE_STRINGS:
            return False
        return default
    return default


def safe_str(value: Any, default: str) -> str:
    """str conversion. None/empty/non-str return default.

    Note:
        None is handled explicitly so str(None) never yields "None".
    """
    if value is None:
        return default
    if not isinstance(value, str):
        return default
    if not value:
        return default
    return value


def normalize_path(value: Any) -> str | None:
    """Path normalization. None/empty/whitespace-only/non-str become None."""
    if value is None:
        return None
    if not isinstance(value, str):
        return None
    if not value.strip():
        return None
    return value


# =============================================================================
# Dataclasses
# =============================================================================


@dataclass(frozen=True)
class AppSettings:
    """Application settings (``settings`` section of the config file).

    Thread-safety: Immutable (frozen=True)

    Attributes:
        data_file: JSON file holding the persisted skill data
        share_base_url: Base URL prefixed to ``#d=<token>`` share links
        auto_print_delay_ms: Delay before window.print() in auto-print exports
        log_level: Root log level name
        window_width: Initial window width (logical pixels)
        window_height: Initial window height (logical pixels)
        subject_name: Default subject name written into snapshots
    """

    data_file: str = "skillradar.json"
    share_base_url: str = "skillradar.html"
    auto_print_delay_ms: int = 400
    log_level: str = "WARNING"
    window_width: int = 1100
    window_height: int = 720
    subject_name: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "AppSettings":
        """Build from a dict. Missing keys use defaults, bad types are converted safely."""
        log_level = safe_str(d.get("log_level"), "WARNING").upper()
        if log_level not in _LOG_LEVELS:
            log_level = "WARNING"
        delay = safe_int(d.get("auto_print_delay_ms"), 400)
        width = safe_int(d.get("window_width"), 1100)
        height = safe_int(d.get("window_height"), 720)
        subject = d.get("subject_name")
        return cls(
            data_file=normalize_path(d.get("data_file")) or "skillradar.json",
            share_base_url=safe_str(d.get("share_base_url"), "skillradar.html"),
            auto_print_delay_ms=delay if delay >= 0 else 400,
            log_level=log_level,
            window_width=width if width > 0 else 1100,
            window_height=height if height > 0 else 720,
            subject_name=(subject.strip() or None) if isinstance(subject, str) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_settings(config_store: Any) -> AppSettings:
    """Read AppSettings from a JsonFileConfigStore (or any ``get(key)`` mapping)."""
    section = config_store.get(SETTINGS_SECTION) or {}
    return AppSettings.from_dict(section)
