"""Entity Store: tasks, competencies and the sparse score relation.

Layout:
- tasks / competencies live in insertion-ordered dicts keyed by a stable id
  (ids come from monotonically increasing counters and are never reused)
- scores live in one flat dict keyed by (task_id, competency_id)

Cascading deletes filter the flat score dict by id, so no score entry can
outlive either of its endpoints.

The store holds no callbacks. Whoever mutates it is responsible for the
follow-up (recompute, redraw, persist); see skillradar.core.session.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Iterable, Optional, Protocol

from skillradar.common.settings import safe_int, safe_str
from skillradar.core.models import (
    SCORE_MAX,
    Competency,
    ScoreKey,
    ScoreMap,
    Task,
    clamp_score,
)

_logger = logging.getLogger("skillradar.core.store")


class SkillDataSource(Protocol):
    """Read interface shared by EntityStore and SnapshotPayload."""

    @property
    def tasks(self) -> tuple[Task, ...]: ...

    @property
    def competencies(self) -> tuple[Competency, ...]: ...

    @property
    def scores(self) -> Mapping[ScoreKey, int]: ...

    def get_score(self, task_id: int, competency_id: int) -> int: ...

    def get_task(self, task_id: int) -> Optional[Task]: ...

    def get_competency(self, competency_id: int) -> Optional[Competency]: ...


_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def parse_score_input(raw: Any) -> int:
    """Turn raw user input into a score in [0, 10].

    Numbers are truncated toward zero and strings are read up to their
    leading integer ("7.5" -> 7, "8 pt" -> 8). Non-numeric input becomes 0,
    which callers treat as "remove this score".
    """
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        value = int(raw) if math.isfinite(raw) else 0
    else:
        match = _LEADING_INT_RE.match(str(raw))
        value = int(match.group(1)) if match else 0
    return max(0, min(SCORE_MAX, value))


class EntityStore:
    """Mutable in-memory store for one session."""

    def __init__(self) -> None:
        self._tasks: dict[int, Task] = {}
        self._competencies: dict[int, Competency] = {}
        self._scores: ScoreMap = {}
        self._next_task_id = 1
        self._next_competency_id = 1

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks.values())

    @property
    def competencies(self) -> tuple[Competency, ...]:
        return tuple(self._competencies.values())

    @property
    def scores(self) -> Mapping[ScoreKey, int]:
        """Read-only live view of the flat score relation."""
        return MappingProxyType(self._scores)

    @property
    def next_task_id(self) -> int:
        return self._next_task_id

    @property
    def next_competency_id(self) -> int:
        return self._next_competency_id

    def get_task(self, task_id: int) -> Optional[Task]:
        return self._tasks.get(task_id)

    def get_competency(self, competency_id: int) -> Optional[Competency]:
        return self._competencies.get(competency_id)

    def get_score(self, task_id: int, competency_id: int) -> int:
        """Score for the pair, or 0 when unset (0 is never stored)."""
        return self._scores.get((task_id, competency_id), 0)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def add_task(self, name: str, description: str = "") -> Optional[Task]:
        """Create a task. Returns None (and creates nothing) for a blank name."""
        name = (name or "").strip()
        if not name:
            return None
        task = Task(id=self._next_task_id, name=name, description=(description or "").strip())
        self._tasks[task.id] = task
        self._next_task_id += 1
        return task

    def remove_task(self, task_id: int) -> bool:
        """Delete a task and every score keyed by it. Unknown ids are a no-op."""
        if self._tasks.pop(task_id, None) is None:
            return False
        self._scores = {key: v for key, v in self._scores.items() if key[0] != task_id}
        return True

    # ------------------------------------------------------------------
    # Competencies
    # ------------------------------------------------------------------

    def add_competency(self, name: str) -> Optional[Competency]:
        """Create a competency. Returns None (and creates nothing) for a blank name."""
        name = (name or "").strip()
        if not name:
            return None
        competency = Competency(id=self._next_competency_id, name=name)
        self._competencies[competency.id] = competency
        self._next_competency_id += 1
        return competency

    def remove_competency(self, competency_id: int) -> bool:
        """Delete a competency and its column from every task's scores."""
        if self._competencies.pop(competency_id, None) is None:
            return False
        self._scores = {key: v for key, v in self._scores.items() if key[1] != competency_id}
        return True

    # ------------------------------------------------------------------
    # Scores
    # ------------------------------------------------------------------

    def set_score(self, task_id: int, competency_id: int, value: int) -> bool:
        """Store a score clamped into [1, 10].

        value <= 0 means "remove this score"; it is never clamped up to 1.
        Returns False when either id no longer exists.
        """
        if task_id not in self._tasks or competency_id not in self._competencies:
            _logger.debug("set_score ignored for stale ids task=%s competency=%s", task_id, competency_id)
            return False
        if value <= 0:
            self.remove_score(task_id, competency_id)
            return True
        self._scores[(task_id, competency_id)] = clamp_score(value)
        return True

    def remove_score(self, task_id: int, competency_id: int) -> bool:
        return self._scores.pop((task_id, competency_id), None) is not None

    # ------------------------------------------------------------------
    # Serialization (persisted-state format)
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Persisted JSON document: nested scores keyed by string ids."""
        return {
            "tasks": [t.to_dict() for t in self._tasks.values()],
            "competencies": [c.to_dict() for c in self._competencies.values()],
            "scores": nest_scores(self._scores),
            "nextTaskId": self._next_task_id,
            "nextCompetencyId": self._next_competency_id,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "EntityStore":
        """Rebuild a store from the persisted document.

        Bad rows are skipped and orphaned or out-of-range scores dropped, so
        the result always satisfies the store invariants. Counters never go
        below max(id) + 1.

        Raises:
            TypeError: If ``d`` is not a mapping or its lists are not lists.
        """
        if not isinstance(d, Mapping):
            raise TypeError(f"state must be a mapping, got {type(d).__name__}")
        store = cls()
        for task in parse_tasks(d.get("tasks") or []):
            store._tasks[task.id] = task
        for competency in parse_competencies(d.get("competencies") or []):
            store._competencies[competency.id] = competency
        store._scores = parse_nested_scores(d.get("scores") or {}, store._tasks.keys(), store._competencies.keys())

        max_task = max(store._tasks, default=0)
        max_comp = max(store._competencies, default=0)
        store._next_task_id = max(safe_int(d.get("nextTaskId"), 1), max_task + 1)
        store._next_competency_id = max(safe_int(d.get("nextCompetencyId"), 1), max_comp + 1)
        return store

    def __repr__(self) -> str:
        return (
            f"EntityStore(tasks={len(self._tasks)}, competencies={len(self._competencies)}, "
            f"scores={len(self._scores)})"
        )


# ----------------------------------------------------------------------
# Parsing helpers shared with the snapshot codec
# ----------------------------------------------------------------------


def nest_scores(scores: Mapping[ScoreKey, int]) -> dict[str, dict[str, int]]:
    """Flat (task, competency) map -> {"task_id": {"competency_id": value}}."""
    nested: dict[str, dict[str, int]] = {}
    for (task_id, competency_id), value in scores.items():
        nested.setdefault(str(task_id), {})[str(competency_id)] = value
    return nested


def _positive_id(value: Any) -> Optional[int]:
    ident = safe_int(value, 0)
    return ident if ident >= 1 else None


def parse_tasks(rows: Iterable[Any]) -> list[Task]:
    if not isinstance(rows, list):
        raise TypeError("tasks must be a list")
    tasks: dict[int, Task] = {}
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        ident = _positive_id(row.get("id"))
        name = safe_str(row.get("name"), "").strip()
        if ident is None or not name or ident in tasks:
            _logger.debug("Skipping invalid task row: %r", row)
            continue
        description = row.get("description")
        tasks[ident] = Task(id=ident, name=name, description=description if isinstance(description, str) else "")
    return list(tasks.values())


def parse_competencies(rows: Iterable[Any]) -> list[Competency]:
    if not isinstance(rows, list):
        raise TypeError("competencies must be a list")
    competencies: dict[int, Competency] = {}
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        ident = _positive_id(row.get("id"))
        name = safe_str(row.get("name"), "").strip()
        if ident is None or not name or ident in competencies:
            _logger.debug("Skipping invalid competency row: %r", row)
            continue
        competencies[ident] = Competency(id=ident, name=name)
    return list(competencies.values())


def parse_nested_scores(
    nested: Any,
    task_ids: Iterable[int],
    competency_ids: Iterable[int],
) -> ScoreMap:
    """Nested {task: {competency: value}} -> flat map, keeping only valid entries.

    Entries whose ids do not resolve, or whose value is not an integer in
    [1, 10], are dropped.
    """
    if not isinstance(nested, Mapping):
        raise TypeError("scores must be a mapping")
    known_tasks = set(task_ids)
    known_comps = set(competency_ids)
    flat: ScoreMap = {}
    for task_key, row in nested.items():
        task_id = _positive_id(task_key)
        if task_id not in known_tasks or not isinstance(row, Mapping):
            continue
        for comp_key, value in row.items():
            comp_id = _positive_id(comp_key)
            score = safe_int(value, 0)
            if comp_id not in known_comps or not 1 <= score <= SCORE_MAX:
                continue
            flat[(task_id, comp_id)] = score
    return flat
