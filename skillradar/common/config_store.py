# skillradar/common/config_store.py
"""JSON-based section store (Kivy-independent).

Holds named sections (``settings``, ``skill-data``) in one JSON file.
It implements the Mapping protocol to allow dict(store) conversion.

Usage:
    from skillradar.common.config_store import JsonFileConfigStore

    store = JsonFileConfigStore("skillradar.json", indent=2)
    store.put("settings", log_level="INFO")
    value = store.get("settings")["log_level"]
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Iterator, Mapping
from datetime import datetime
from threading import Lock
from typing import Any


def _get_logger() -> logging.Logger:
    """Get module logger (lazy to avoid side effect at import time)."""
    return logging.getLogger(__name__)


class JsonFileConfigStore(Mapping[str, dict[str, Any]]):
    """JSON file store of dict sections.

    Thread-safe. Writes are atomic (temp file + os.replace).

    Args:
        filename: Path to JSON file
        indent: JSON indentation (default 2)
    """

    def __init__(self, filename: str, indent: int = 2):
        self._filename = filename
        self._indent = indent
        self._lock = Lock()
        self._data: dict[str, dict[str, Any]] = {}
        self._load()

    @property
    def filename(self) -> str:
        return self._filename

    def _load(self) -> None:
        """Load data from the JSON file; a corrupt file is moved aside."""
        if not os.path.exists(self._filename):
            self._data = {}
            return
        try:
            with open(self._filename, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            _get_logger().warning("Corrupt data file %s: %s", self._filename, e)
            self._preserve_corrupt_file()
            self._data = {}
            return

        if not isinstance(data, dict):
            _get_logger().warning(
                "Data file %s does not hold an object (got %s), ignoring", self._filename, type(data).__name__
            )
            self._preserve_corrupt_file()
            self._data = {}
            return

        # Every section must be a dict
        for key, value in list(data.items()):
            if not isinstance(value, dict):
                _get_logger().warning("Section %s is not a dict (got %s), removing", key, type(value).__name__)
                del data[key]
        self._data = data

    def _preserve_corrupt_file(self) -> None:
        """Rename an unreadable file with a timestamp suffix for manual recovery."""
        try:
            timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
            os.rename(self._filename, f"{self._filename}.corrupt.{timestamp}")
        except OSError as e:
            _get_logger().warning("Could not move corrupt file %s aside: %s", self._filename, e)

    def _save(self) -> None:
        """Save data to the JSON file atomically.

        Raises:
            OSError: If file operations fail (caller handles).
            TypeError: If JSON serialization fails.
        """
        dirname = os.path.dirname(self._filename)
        save_dir = dirname if dirname else "."
        os.makedirs(save_dir, exist_ok=True)

        fd = None
        temp_path = None
        try:
            fd, temp_path = tempfile.mkstemp(suffix=".tmp", dir=save_dir)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                fd = None  # os.fdopen took ownership
                json.dump(self._data, f, indent=self._indent, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self._filename)
            temp_path = None
        finally:
            if fd is not None:
                os.close(fd)
            if temp_path is not None:
                with contextlib.suppress(OSError):
                    os.unlink(temp_path)

    def get(self, key: str) -> dict[str, Any] | None:  # type: ignore[override]
        """Get a section by key (shallow copy), or None if not found."""
        with self._lock:
            value = self._data.get(key)
            return dict(value) if value is not None else None

    def put(self, key: str, **kwargs: Any) -> None:
        """Store a section and write the file.

        On a write failure the in-memory section is kept and the error is
        re-raised so the caller can decide how to degrade.
        """
        with self._lock:
            self._data[key] = kwargs
            self._save()

    def delete(self, key: str) -> bool:
        """Delete a section. Returns True if deleted, False if not found."""
        with self._lock:
            if key in self._data:
                del self._data[key]
                self._save()
                return True
            return False

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        with self._lock:
            return key in self._data

    def __getitem__(self, key: str) -> dict[str, Any]:
        with self._lock:
            return dict(self._data[key])

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._data.keys()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __repr__(self) -> str:
        return f"JsonFileConfigStore({self._filename!r})"
