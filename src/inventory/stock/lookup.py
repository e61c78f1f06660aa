"""Read-side lookups on the inventory ledger."""

from protean.utils.globals import current_domain
from shared.errors import NotFound

from inventory.stock.stock import InventoryItem


def find_item_by_sku(sku: str) -> InventoryItem:
    """Return the item registered under ``sku`` or raise NotFound."""
    repo = current_domain.repository_for(InventoryItem)
    item = repo.find_by_sku(sku.strip().upper())
    if item is None:
        raise NotFound({"sku": [f"No inventory item with SKU {sku}"]})
    return item
