"""Stock movements — command and handler.

Every physical change to stock goes through AddMovement. The handler loads
the item, lets the aggregate validate and apply the movement, and persists
it; a rejected movement leaves the item untouched.
"""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.stock import InventoryItem, MovementType


@inventory.command(part_of="InventoryItem")
class AddMovement:
    """Append a movement (in, out, transfer, adjustment, damaged, expired, lost)."""

    inventory_item_id = Identifier(required=True)
    movement_type = String(required=True, max_length=20, choices=MovementType)
    quantity = Integer(required=True)  # signed for adjustments
    reason = String(max_length=500)
    actor = String(max_length=100)
    reference = String(max_length=255)
    notes = String(max_length=1000)


@inventory.command_handler(part_of=InventoryItem)
class MovementHandler:
    @handle(AddMovement)
    def add_movement(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)
        movement = item.add_movement(
            movement_type=command.movement_type,
            quantity=command.quantity,
            reason=command.reason,
            actor=command.actor,
            reference=command.reference,
            notes=command.notes,
        )
        repo.add(item)
        return {
            "movement_id": str(movement.id),
            "effect": movement.effect,
            "current": item.stock.current,
            "reserved": item.stock.reserved,
            "available": item.stock.available,
            "status": item.status,
        }
