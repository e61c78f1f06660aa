"""Order timeline — append-only audit trail of every order transition.

The Order aggregate only keeps its most recent status entries; this
projection holds the complete history.
"""

import json
import uuid

from protean.core.projector import on
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from dispatch.domain import dispatch
from dispatch.order.events import (
    OrderAssigned,
    OrderAssignmentReleased,
    OrderCancelled,
    OrderCreated,
    OrderNoteAdded,
    OrderStatusChanged,
)
from dispatch.order.order import Order


@dispatch.projection
class OrderTimeline:
    entry_id = Identifier(identifier=True, required=True)
    order_id = Identifier(required=True)
    event_type = String(required=True)
    description = String(required=True)
    actor = String()
    occurred_at = DateTime(required=True)
    event_metadata = Text()  # JSON: extra event data


def _add_entry(order_id, event_type, description, occurred_at, actor=None, event_metadata=None):
    current_domain.repository_for(OrderTimeline).add(
        OrderTimeline(
            entry_id=str(uuid.uuid4()),
            order_id=order_id,
            event_type=event_type,
            description=description,
            actor=actor,
            occurred_at=occurred_at,
            event_metadata=json.dumps(event_metadata) if event_metadata else None,
        )
    )


@dispatch.projector(projector_for=OrderTimeline, aggregates=[Order])
class OrderTimelineProjector:
    @on(OrderCreated)
    def on_order_created(self, event):
        _add_entry(
            event.order_id,
            "OrderCreated",
            f"Order {event.order_number} was created",
            event.created_at,
            actor=event.created_by,
            event_metadata={"tracking_number": event.tracking_number},
        )

    @on(OrderStatusChanged)
    def on_status_changed(self, event):
        metadata = {"automatic": event.automatic}
        if event.latitude is not None:
            metadata.update(latitude=event.latitude, longitude=event.longitude, address=event.address)
        _add_entry(
            event.order_id,
            "OrderStatusChanged",
            f"Status changed from {event.previous_status} to {event.new_status}",
            event.changed_at,
            actor=event.actor,
            event_metadata=metadata,
        )

    @on(OrderAssigned)
    def on_order_assigned(self, event):
        _add_entry(
            event.order_id,
            "OrderAssigned",
            f"Assigned to driver {event.driver_id} with vehicle {event.vehicle_id}",
            event.assigned_at,
            event_metadata={"route_id": event.route_id} if event.route_id else None,
        )

    @on(OrderAssignmentReleased)
    def on_assignment_released(self, event):
        _add_entry(
            event.order_id,
            "OrderAssignmentReleased",
            f"Released from vehicle {event.vehicle_id}: {event.reason}",
            event.released_at,
            actor="system",
        )

    @on(OrderCancelled)
    def on_order_cancelled(self, event):
        _add_entry(
            event.order_id,
            "OrderCancelled",
            f"Order cancelled: {event.reason}",
            event.cancelled_at,
            actor=event.cancelled_by,
            event_metadata={"refund_amount": event.refund_amount},
        )

    @on(OrderNoteAdded)
    def on_note_added(self, event):
        if event.private:
            return
        _add_entry(event.order_id, "OrderNoteAdded", event.text, event.added_at, actor=event.author)
