"""Item lifecycle — deactivate, reactivate and discontinue.

Items are never deleted; taking one out of circulation is a status change.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.stock import InventoryItem


@inventory.command(part_of="InventoryItem")
class DeactivateItem:
    inventory_item_id = Identifier(required=True)
    reason = String(max_length=500)


@inventory.command(part_of="InventoryItem")
class ReactivateItem:
    inventory_item_id = Identifier(required=True)


@inventory.command(part_of="InventoryItem")
class DiscontinueItem:
    inventory_item_id = Identifier(required=True)
    reason = String(max_length=500)


@inventory.command_handler(part_of=InventoryItem)
class ItemLifecycleHandler:
    @handle(DeactivateItem)
    def deactivate_item(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)
        item.deactivate(reason=command.reason)
        repo.add(item)

    @handle(ReactivateItem)
    def reactivate_item(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)
        item.reactivate()
        repo.add(item)

    @handle(DiscontinueItem)
    def discontinue_item(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)
        item.discontinue(reason=command.reason)
        repo.add(item)
