"""Repository for the InventoryItem aggregate."""

from inventory.domain import inventory

from .stock import InventoryItem


@inventory.repository(part_of=InventoryItem)
class InventoryItemRepository:
    def find_by_sku(self, sku: str) -> InventoryItem | None:
        """Find an item by its normalized SKU."""
        return self._dao.query.filter(sku=sku).all().first
