"""Outbound event handler — forwards order events to the event sink."""

from protean.utils.mixins import handle
from shared.sink.forwarding import forward

from dispatch.domain import dispatch
from dispatch.order.events import (
    OrderAssigned,
    OrderAssignmentReleased,
    OrderCancelled,
    OrderCreated,
    OrderStatusChanged,
)
from dispatch.order.order import Order


@dispatch.event_handler(part_of=Order)
class OrderEventForwarder:
    @handle(OrderCreated)
    def on_order_created(self, event: OrderCreated) -> None:
        forward(event, "Order", event.order_id)

    @handle(OrderStatusChanged)
    def on_status_changed(self, event: OrderStatusChanged) -> None:
        forward(event, "Order", event.order_id)

    @handle(OrderAssigned)
    def on_order_assigned(self, event: OrderAssigned) -> None:
        forward(event, "Order", event.order_id)

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        forward(event, "Order", event.order_id)

    @handle(OrderAssignmentReleased)
    def on_assignment_released(self, event: OrderAssignmentReleased) -> None:
        forward(event, "Order", event.order_id)
