"""Persisted-state repository.

State lives in the ``skill-data`` section of a JsonFileConfigStore file:

    {"tasks": [...], "competencies": [...],
     "scores": {"1": {"2": 7}}, "nextTaskId": 10, "nextCompetencyId": 5}

Loading never fails startup: a missing or malformed section falls back to
the caller's defaults. Saving never raises: failures are logged and the
session keeps running in memory.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from skillradar.common.config_store import JsonFileConfigStore
from skillradar.core.errors import PersistenceError
from skillradar.core.store import EntityStore

STATE_KEY = "skill-data"


def _get_logger() -> logging.Logger:
    return logging.getLogger(__name__)


class StateRepository:
    """Loads and saves one EntityStore under a fixed key."""

    def __init__(self, config_store: JsonFileConfigStore, key: str = STATE_KEY) -> None:
        self._config_store = config_store
        self._key = key

    @classmethod
    def open(cls, filename: str) -> "StateRepository":
        return cls(JsonFileConfigStore(filename))

    def load(self, default_factory: Callable[[], EntityStore]) -> EntityStore:
        """Return the persisted store, or ``default_factory()`` when there is none."""
        try:
            return self._load_strict()
        except PersistenceError as e:
            _get_logger().info("Using default data: %s", e)
        except (TypeError, ValueError, AttributeError) as e:
            _get_logger().warning("Persisted state under %r is malformed: %s", self._key, e)
        return default_factory()

    def _load_strict(self) -> EntityStore:
        """Raises PersistenceError when nothing is stored."""
        section: Optional[dict] = self._config_store.get(self._key)
        if not section:
            raise PersistenceError(f"no state stored under {self._key!r}")
        return EntityStore.from_dict(section)

    def save(self, store: EntityStore) -> bool:
        """Persist the store. Returns False (after logging) on failure."""
        try:
            self._config_store.put(self._key, **store.to_dict())
        except (OSError, TypeError, ValueError) as e:
            _get_logger().warning("Could not save skill data to %s: %s", self._config_store.filename, e)
            return False
        return True

    def clear(self) -> bool:
        try:
            return self._config_store.delete(self._key)
        except OSError as e:
            _get_logger().warning("Could not clear skill data: %s", e)
            return False
