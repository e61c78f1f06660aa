"""Order domain events — immutable facts about order lifecycle changes.

All events are past tense, versioned, and carry enough data for the order
timeline projection and for the event sink.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from dispatch.domain import dispatch


@dispatch.event(part_of="Order")
class OrderCreated:
    """A new shipment order was accepted in ``pending``."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    order_number = String(required=True)
    tracking_number = String(required=True)
    customer_id = Identifier(required=True)
    order_type = String()
    priority = String()
    total_weight = Float()
    total_amount = Float()
    created_by = String()
    created_at = DateTime(required=True)


@dispatch.event(part_of="Order")
class OrderStatusChanged:
    """The order moved along its lifecycle."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    actor = String()
    notes = String()
    automatic = Boolean(default=False)
    latitude = Float()
    longitude = Float()
    address = String()
    changed_at = DateTime(required=True)


@dispatch.event(part_of="Order")
class OrderAssigned:
    """A driver and vehicle (and possibly a route) were bound to the order."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    order_number = String(required=True)
    driver_id = Identifier(required=True)
    vehicle_id = Identifier(required=True)
    route_id = Identifier()
    assigned_at = DateTime(required=True)


@dispatch.event(part_of="Order")
class OrderAssignmentReleased:
    """Driver, vehicle and route were unbound; the order can be assigned again."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    order_number = String(required=True)
    driver_id = Identifier()
    vehicle_id = Identifier()
    route_id = Identifier()
    reason = String()
    released_at = DateTime(required=True)


@dispatch.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled before delivery."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    reason = String(required=True)
    cancelled_by = String()
    refund_amount = Float(required=True)
    cancelled_at = DateTime(required=True)


@dispatch.event(part_of="Order")
class OrderNoteAdded:
    """An internal note was attached to the order."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    author = String()
    text = String(required=True)
    private = Boolean(default=False)
    added_at = DateTime(required=True)
