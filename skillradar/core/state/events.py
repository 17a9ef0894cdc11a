# skillradar/core/state/events.py
"""Event types and base Event class for the notification system.

All events are frozen (immutable). Payloads are wrapped in MappingProxyType
(shallow immutability only: nested objects stay mutable).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


class EventType(Enum):
    """Event type enumeration.

    Each type has a string value for debugging/logging purposes.
    """

    DATA_CHANGED = "data_changed"  # Tasks, competencies or scores mutated
    SELECTION_CHANGED = "selection_changed"  # Detail panel opened/closed


def _freeze_payload(payload: dict[str, Any] | None) -> Mapping[str, Any] | None:
    if payload is None:
        return None
    return MappingProxyType(dict(payload))  # Copy then proxy


@dataclass(frozen=True)
class Event:
    """Immutable event.

    Example:
        >>> event = Event.create(EventType.DATA_CHANGED, {"reason": "add_task"})
        >>> event.payload["reason"]
        'add_task'
    """

    event_type: EventType
    _payload: Mapping[str, Any] | None = field(default=None, repr=False)

    @classmethod
    def create(cls, event_type: EventType, payload: dict[str, Any] | None = None) -> "Event":
        """Create an Event with a frozen (shallow-copied) payload."""
        return cls(event_type=event_type, _payload=_freeze_payload(payload))

    @property
    def payload(self) -> Mapping[str, Any] | None:
        return self._payload
