"""Hand committed domain events to the configured event sink.

Event handlers in each context call ``forward`` for the events that callers
outside the core care about. Emission happens after the unit of work has
committed and is fire-and-forget: a sink failure is logged and dropped.
"""

import json

import structlog
from protean.utils.reflection import declared_fields

from shared.sink import get_event_sink

logger = structlog.get_logger(__name__)


def event_payload(event) -> dict:
    """JSON-safe dict of the event's declared fields."""
    body = {name: getattr(event, name, None) for name in declared_fields(event.__class__) if not name.startswith("_")}
    return json.loads(json.dumps(body, default=str))


def forward(event, entity_type: str, entity_id) -> None:
    kind = event.__class__.__name__
    try:
        get_event_sink().emit(kind, entity_type, str(entity_id), event_payload(event))
    except Exception as exc:
        logger.warning(
            "Event sink rejected event",
            kind=kind,
            entity_type=entity_type,
            entity_id=str(entity_id),
            error=str(exc),
        )
