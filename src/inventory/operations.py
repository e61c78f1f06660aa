"""Inventory contract surface — serialized entry points for callers.

Each mutating operation holds the item's serialization point for the whole
``current_domain.process`` call, so the stock check, the write and the commit
form one critical section: two concurrent reservations against the same item
run one after the other, and the second sees the first one's result.

Must be called inside an inventory domain context.
"""

from datetime import datetime

from protean.utils.globals import current_domain
from shared.locking import serialized

from inventory.stock.alerts import CheckAlerts
from inventory.stock.initialization import RegisterItem
from inventory.stock.lifecycle import DeactivateItem, DiscontinueItem, ReactivateItem
from inventory.stock.lookup import find_item_by_sku
from inventory.stock.movements import AddMovement
from inventory.stock.reservation import ReleaseReservedStock, ReserveStock
from inventory.stock.stock import InventoryItem

__all__ = [
    "add_inventory_movement",
    "check_alerts",
    "deactivate_item",
    "discontinue_item",
    "find_item_by_sku",
    "get_item",
    "reactivate_item",
    "register_item",
    "release_reserved_stock",
    "reserve_stock",
]


def _item(item_id) -> tuple[str, str]:
    return ("InventoryItem", str(item_id))


def get_item(item_id) -> InventoryItem:
    return current_domain.repository_for(InventoryItem).get(item_id)


def register_item(sku: str, name: str, **details) -> str:
    """Register a SKU; returns the new item id."""
    command = RegisterItem(sku=sku, name=name, **details)
    with serialized(("InventoryItem", f"sku:{command.sku.strip().upper()}")):
        return current_domain.process(command, asynchronous=False)


def add_inventory_movement(
    item_id,
    movement_type: str,
    quantity: int,
    reason: str | None = None,
    actor: str | None = None,
    reference: str | None = None,
    notes: str | None = None,
) -> dict:
    command = AddMovement(
        inventory_item_id=item_id,
        movement_type=movement_type,
        quantity=quantity,
        reason=reason,
        actor=actor,
        reference=reference,
        notes=notes,
    )
    with serialized(_item(item_id)):
        return current_domain.process(command, asynchronous=False)


def reserve_stock(item_id, quantity: int, reason: str | None = None, actor: str | None = None) -> dict:
    command = ReserveStock(inventory_item_id=item_id, quantity=quantity, reason=reason, actor=actor)
    with serialized(_item(item_id)):
        return current_domain.process(command, asynchronous=False)


def release_reserved_stock(item_id, quantity: int, reason: str | None = None, actor: str | None = None) -> dict:
    command = ReleaseReservedStock(inventory_item_id=item_id, quantity=quantity, reason=reason, actor=actor)
    with serialized(_item(item_id)):
        return current_domain.process(command, asynchronous=False)


def check_alerts(item_id, as_of: datetime | None = None) -> list[dict]:
    command = CheckAlerts(inventory_item_id=item_id, as_of=as_of)
    with serialized(_item(item_id)):
        return current_domain.process(command, asynchronous=False)


def deactivate_item(item_id, reason: str | None = None) -> None:
    with serialized(_item(item_id)):
        current_domain.process(DeactivateItem(inventory_item_id=item_id, reason=reason), asynchronous=False)


def reactivate_item(item_id) -> None:
    with serialized(_item(item_id)):
        current_domain.process(ReactivateItem(inventory_item_id=item_id), asynchronous=False)


def discontinue_item(item_id, reason: str | None = None) -> None:
    with serialized(_item(item_id)):
        current_domain.process(DiscontinueItem(inventory_item_id=item_id, reason=reason), asynchronous=False)
