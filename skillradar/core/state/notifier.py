# skillradar/core/state/notifier.py
"""State notification system (thread-safe, Kivy-independent).

StateNotifier is the post-mutation boundary: the session publishes
DATA_CHANGED after each store mutation and subscribers recompute, redraw,
refresh the detail panel and persist.

- One failing listener does not stop the others
- notify() works on a snapshot of the listener list, so listeners removed
  during notify() still receive the current event
- Logger is optional: Callable[[str], None]; stderr is the fallback
"""

import sys
import threading
import traceback
from collections.abc import Callable

from skillradar.core.state.events import Event, EventType

LoggerType = Callable[[str], None]


class StateNotifier:
    """Pub-sub notifier keyed by EventType."""

    def __init__(self, logger: LoggerType | None = None) -> None:
        self._subscribers: dict[EventType, list[Callable[[Event], None]]] = {}
        self._lock = threading.RLock()
        self._logger = logger

    def subscribe(self, event_type: EventType, callback: Callable[[Event], None]) -> None:
        """Subscribe a callback. Duplicate subscriptions are ignored."""
        with self._lock:
            callbacks = self._subscribers.setdefault(event_type, [])
            if callback not in callbacks:
                callbacks.append(callback)

    def unsubscribe(self, event_type: EventType, callback: Callable[[Event], None]) -> None:
        """Unsubscribe a callback. Unknown callbacks are a no-op."""
        with self._lock:
            callbacks = self._subscribers.get(event_type)
            if callbacks and callback in callbacks:
                callbacks.remove(callback)

    def notify(self, event: Event) -> None:
        """Call every subscriber of ``event.event_type`` in subscription order."""
        with self._lock:
            callbacks = self._subscribers.get(event.event_type, [])[:]

        for callback in callbacks:
            try:
                callback(event)
            except Exception as e:
                self._log_error(event, callback, e)

    def _log_error(self, event: Event, callback: Callable[[Event], None], e: Exception) -> None:
        """Report a failed callback once, message plus traceback."""
        cb_name = getattr(callback, "__name__", repr(callback))
        msg = f"[StateNotifier] {event.event_type.value}: {cb_name} failed: {type(e).__name__}: {e!r}"
        full_msg = f"{msg}\n{traceback.format_exc()}"

        if self._logger:
            try:
                self._logger(full_msg)
                return
            except Exception as log_error:
                full_msg = f"{full_msg}\n[StateNotifier] logger failed: {log_error!r}"
        print(full_msg, file=sys.stderr)

