# skillradar/core/state/__init__.py
"""State notification system.

Public API:
    - EventType: Enum of event types (DATA_CHANGED, SELECTION_CHANGED, ...)
    - Event: Immutable event dataclass with optional payload
    - StateNotifier: Pub-sub notification system
"""
from skillradar.core.state.events import Event, EventType
from skillradar.core.state.notifier import StateNotifier

__all__ = ["EventType", "Event", "StateNotifier"]
