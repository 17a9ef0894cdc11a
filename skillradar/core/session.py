"""Session: the explicit state object for one running view.

A Session owns a data source (a mutable EntityStore, or a frozen
SnapshotPayload for shared views), a StateNotifier and, for interactive
sessions, a StateRepository. Every successful mutation is followed
synchronously by:

    1. closing the detail selection if its competency vanished
    2. DATA_CHANGED -> subscribers recompute levels, redraw, refresh panel
    3. persist through the repository

Nothing is cached between mutations.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from skillradar.core.aggregation import competency_detail, levels_from_source
from skillradar.core.models import Competency, CompetencyDetail, CompetencyLevel, Task
from skillradar.core.persistence import StateRepository
from skillradar.core.snapshot import SnapshotPayload, build_share_url, encode_snapshot, snapshot_from_store
from skillradar.core.state import Event, EventType, StateNotifier
from skillradar.core.store import EntityStore, SkillDataSource, parse_score_input

_logger = logging.getLogger("skillradar.core.session")


class Session:
    def __init__(
        self,
        source: SkillDataSource,
        *,
        notifier: Optional[StateNotifier] = None,
        repository: Optional[StateRepository] = None,
        subject_name: Optional[str] = None,
    ) -> None:
        self._source = source
        self._notifier = notifier or StateNotifier(logger=_logger.error)
        self._repository = repository
        self._selected_id: Optional[int] = None
        if isinstance(source, SnapshotPayload) and subject_name is None:
            subject_name = source.subject_name
        self.subject_name = subject_name

    @classmethod
    def interactive(
        cls,
        store: EntityStore,
        repository: Optional[StateRepository] = None,
        **kwargs: Any,
    ) -> "Session":
        return cls(store, repository=repository, **kwargs)

    @classmethod
    def shared(cls, payload: SnapshotPayload, **kwargs: Any) -> "Session":
        """Read-only session over a decoded snapshot."""
        return cls(payload, **kwargs)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def source(self) -> SkillDataSource:
        return self._source

    @property
    def notifier(self) -> StateNotifier:
        return self._notifier

    @property
    def read_only(self) -> bool:
        return not isinstance(self._source, EntityStore)

    @property
    def selected_competency_id(self) -> Optional[int]:
        return self._selected_id

    def levels(self) -> list[CompetencyLevel]:
        return levels_from_source(self._source)

    def selected_detail(self) -> Optional[CompetencyDetail]:
        """Detail for the open panel, or None when closed (or stale)."""
        if self._selected_id is None:
            return None
        detail = competency_detail(self._source, self._selected_id)
        if detail is None:
            self.clear_selection()
        return detail

    # ------------------------------------------------------------------
    # Selection (allowed in read-only sessions)
    # ------------------------------------------------------------------

    def select_competency(self, competency_id: Optional[int]) -> bool:
        if competency_id is None or self._source.get_competency(competency_id) is None:
            return False
        self._selected_id = competency_id
        self._notifier.notify(Event.create(EventType.SELECTION_CHANGED, {"competency_id": competency_id}))
        return True

    def clear_selection(self) -> None:
        if self._selected_id is None:
            return
        self._selected_id = None
        self._notifier.notify(Event.create(EventType.SELECTION_CHANGED, {"competency_id": None}))

    # ------------------------------------------------------------------
    # Mutations (interactive sessions only)
    # ------------------------------------------------------------------

    def _writable_store(self, operation: str) -> Optional[EntityStore]:
        if isinstance(self._source, EntityStore):
            return self._source
        _logger.debug("%s ignored: session is read-only", operation)
        return None

    def _changed(self, reason: str) -> None:
        if self._selected_id is not None and self._source.get_competency(self._selected_id) is None:
            self.clear_selection()
        self._notifier.notify(Event.create(EventType.DATA_CHANGED, {"reason": reason}))
        self.persist()

    def persist(self) -> bool:
        store = self._writable_store("persist")
        if store is None or self._repository is None:
            return False
        return self._repository.save(store)

    def add_task(self, name: str, description: str = "") -> Optional[Task]:
        store = self._writable_store("add_task")
        if store is None:
            return None
        task = store.add_task(name, description)
        if task is not None:
            self._changed("add_task")
        return task

    def remove_task(self, task_id: int) -> bool:
        store = self._writable_store("remove_task")
        if store is None or not store.remove_task(task_id):
            return False
        self._changed("remove_task")
        return True

    def add_competency(self, name: str) -> Optional[Competency]:
        store = self._writable_store("add_competency")
        if store is None:
            return None
        competency = store.add_competency(name)
        if competency is not None:
            self._changed("add_competency")
        return competency

    def remove_competency(self, competency_id: int) -> bool:
        store = self._writable_store("remove_competency")
        if store is None or not store.remove_competency(competency_id):
            return False
        self._changed("remove_competency")
        return True

    def set_score(self, task_id: int, competency_id: int, raw_value: Any) -> int:
        """Apply raw user input; returns the stored score (0 = removed/ignored)."""
        store = self._writable_store("set_score")
        if store is None:
            return 0
        if not store.set_score(task_id, competency_id, parse_score_input(raw_value)):
            return 0
        self._changed("set_score")
        return store.get_score(task_id, competency_id)

    def remove_score(self, task_id: int, competency_id: int) -> bool:
        store = self._writable_store("remove_score")
        if store is None or not store.remove_score(task_id, competency_id):
            return False
        self._changed("remove_score")
        return True

    # ------------------------------------------------------------------
    # Sharing
    # ------------------------------------------------------------------

    def snapshot(self) -> SnapshotPayload:
        return snapshot_from_store(self._source, self.subject_name)

    def share_token(self) -> str:
        return encode_snapshot(self.snapshot())

    def share_url(self, base_url: str) -> str:
        return build_share_url(base_url, self.share_token())
