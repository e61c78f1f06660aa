"""Order status updates — command and handler."""

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from dispatch.domain import dispatch
from dispatch.order.order import Order


@dispatch.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=30)
    actor = String(max_length=100)
    notes = String(max_length=1000)
    latitude = Float()
    longitude = Float()
    address = String(max_length=500)


@dispatch.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        location = None
        if command.latitude is not None and command.longitude is not None:
            location = {
                "latitude": command.latitude,
                "longitude": command.longitude,
                "address": command.address,
            }
        order.update_status(command.status, actor=command.actor, notes=command.notes, location=location)
        repo.add(order)
        return order.status
