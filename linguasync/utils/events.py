"""
Change notifications for LinguaSync components.

Catalog, ledger and session each own an EventChannel and emit a
StateChanged event after every mutation. Subscribers receive the event and
pull whatever snapshot they need from the source. A subscriber that raises
is logged and skipped, so the emitting operation always runs to the end.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateChanged:
    """Notification that a component changed state."""
    source: str                  # "catalog", "progress" or "session"
    action: str                  # name of the operation that caused the change
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


Subscriber = Callable[[StateChanged], None]


class EventChannel:
    """Ordered list of subscribers for one event source."""

    def __init__(self, source: str):
        self.source = source
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback.

        Returns:
            A function that removes the callback again
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def emit(self, action: str, **payload: Any) -> StateChanged:
        event = StateChanged(source=self.source, action=action, payload=payload)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception(f"Subscriber failed on {self.source}.{action}")
        return event

    def __len__(self) -> int:
        return len(self._subscribers)
