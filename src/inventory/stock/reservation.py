"""Stock reservation — commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.stock import InventoryItem


@inventory.command(part_of="InventoryItem")
class ReserveStock:
    """Hold stock against an item's available quantity."""

    inventory_item_id = Identifier(required=True)
    quantity = Integer(required=True)
    reason = String(max_length=500)
    actor = String(max_length=100)


@inventory.command(part_of="InventoryItem")
class ReleaseReservedStock:
    """Release held stock. Releasing more than is reserved is clamped."""

    inventory_item_id = Identifier(required=True)
    quantity = Integer(required=True)
    reason = String(max_length=500)
    actor = String(max_length=100)


def _levels(item: InventoryItem) -> dict:
    return {
        "current": item.stock.current,
        "reserved": item.stock.reserved,
        "available": item.stock.available,
        "status": item.status,
    }


@inventory.command_handler(part_of=InventoryItem)
class ReservationHandler:
    @handle(ReserveStock)
    def reserve_stock(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)
        item.reserve(
            quantity=command.quantity,
            reason=command.reason,
            actor=command.actor,
        )
        repo.add(item)
        return _levels(item)

    @handle(ReleaseReservedStock)
    def release_reserved_stock(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)
        released = item.release_reserved(
            quantity=command.quantity,
            reason=command.reason,
            actor=command.actor,
        )
        if released:
            repo.add(item)
        return {"released": released, **_levels(item)}
