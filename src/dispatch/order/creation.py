"""Order creation — command and handler."""

import json

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from dispatch.domain import dispatch
from dispatch.numbering import allocate_numbers
from dispatch.order.order import Order, OrderPriority, OrderType


@dispatch.command(part_of="Order")
class CreateOrder:
    """Accept a new shipment order."""

    customer_id = Identifier(required=True)
    vendor_id = Identifier()
    order_type = String(choices=OrderType, default=OrderType.DELIVERY.value)
    priority = String(choices=OrderPriority, default=OrderPriority.MEDIUM.value)
    pickup = Text(required=True)  # JSON stop dict
    delivery = Text(required=True)  # JSON stop dict
    cargo = Text(required=True)  # JSON list of cargo line dicts
    pricing = Text()  # JSON pricing dict
    special_instructions = Text()
    transit_minutes = Integer(min_value=0)
    created_by = String(max_length=100)


def _load(value):
    return json.loads(value) if isinstance(value, str) else value


@dispatch.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        order_number, tracking_number = allocate_numbers(Order)
        details = {
            key: getattr(command, key)
            for key in ("vendor_id", "order_type", "priority", "special_instructions")
            if getattr(command, key) is not None
        }
        order = Order.create(
            order_number=order_number,
            tracking_number=tracking_number,
            customer_id=command.customer_id,
            pickup=_load(command.pickup),
            delivery=_load(command.delivery),
            cargo=_load(command.cargo),
            pricing=_load(command.pricing),
            transit_minutes=command.transit_minutes,
            created_by=command.created_by,
            **details,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
