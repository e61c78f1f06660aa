"""Order cancellation — command and handler.

Cancelling frees the vehicle bound to the order in the same unit of work.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from dispatch.assignment.coordinator import release_order_vehicle
from dispatch.domain import dispatch
from dispatch.order.order import Order


@dispatch.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(required=True, max_length=500)
    actor = String(max_length=100)


@dispatch.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        refund = order.cancel(command.reason, actor=command.actor)
        released = release_order_vehicle(order, reason=f"Order {order.order_number} cancelled")
        repo.add(order)
        return {"order_id": str(order.id), "refund_amount": refund, "vehicle_released": released}
