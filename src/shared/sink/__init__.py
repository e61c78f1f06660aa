"""Event sink adapter abstraction — fire-and-forget delivery of domain events."""

import os

_sink_instance = None


def get_event_sink():
    """Return the configured event sink adapter (singleton).

    Uses FakeEventSink by default. In production, configure via
    EVENT_SINK_ADAPTER environment variable.
    """
    global _sink_instance
    if _sink_instance is None:
        adapter = os.environ.get("EVENT_SINK_ADAPTER", "fake")
        if adapter == "fake":
            from shared.sink.fake_adapter import FakeEventSink

            _sink_instance = FakeEventSink()
        else:
            raise ValueError(f"Unknown event sink adapter: {adapter}")
    return _sink_instance


def reset_event_sink():
    """Reset the event sink singleton (useful for testing)."""
    global _sink_instance
    _sink_instance = None
