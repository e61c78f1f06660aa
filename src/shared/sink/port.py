"""Event sink port — abstract interface for notification fan-out.

The sink receives domain facts after they are committed. Delivery is
fire-and-forget: callers never consume a return value, and a failing sink
must not undo or block the transaction that produced the event.
"""

from abc import ABC, abstractmethod


class EventSinkPort(ABC):
    """Abstract interface for event sink adapters."""

    @abstractmethod
    def emit(self, kind: str, entity_type: str, entity_id: str, payload: dict) -> None:
        """Hand one event to the sink.

        Args:
            kind: event name, e.g. ``OrderCancelled``
            entity_type: aggregate name, e.g. ``Order``
            entity_id: aggregate identifier
            payload: JSON-serializable event body
        """
        ...
