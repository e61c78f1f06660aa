"""Fake event sink — records emitted events in memory for tests and development."""

from datetime import UTC, datetime

from shared.errors import Unavailable
from shared.sink.port import EventSinkPort


class FakeEventSink(EventSinkPort):
    """Sink that keeps every emitted event in ``emitted``."""

    def __init__(self):
        self.emitted: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Event sink unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Event sink unavailable"):
        """Configure the fake sink behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def emit(self, kind: str, entity_type: str, entity_id: str, payload: dict) -> None:
        if not self.should_succeed:
            raise Unavailable(self.failure_reason)
        self.emitted.append(
            {
                "kind": kind,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "payload": payload,
                "emitted_at": datetime.now(UTC).isoformat(),
            }
        )

    def kinds(self, entity_id: str | None = None) -> list[str]:
        """Event kinds emitted so far, optionally for one entity."""
        return [e["kind"] for e in self.emitted if entity_id is None or e["entity_id"] == entity_id]

    def clear(self) -> None:
        self.emitted.clear()
