"""Inventory domain events — immutable facts about stock changes.

All events are past tense, versioned, and carry the stock levels after the
change so projectors never have to reload the aggregate.
"""

from protean.fields import DateTime, Identifier, Integer, String

from inventory.domain import inventory


@inventory.event(part_of="InventoryItem")
class ItemRegistered:
    """A new SKU was registered in the ledger."""

    __version__ = "v1"

    inventory_item_id = Identifier(required=True)
    sku = String(required=True)
    name = String(required=True)
    reorder_point = Integer(required=True)
    maximum = Integer()
    registered_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class StockMovementRecorded:
    """A movement was appended to the ledger."""

    __version__ = "v1"

    inventory_item_id = Identifier(required=True)
    sku = String(required=True)
    movement_id = Identifier(required=True)
    movement_type = String(required=True)
    quantity = Integer(required=True)
    effect = Integer(required=True)
    previous_current = Integer(required=True)
    new_current = Integer(required=True)
    new_available = Integer(required=True)
    reason = String()
    actor = String()
    reference = String()
    recorded_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class StockReserved:
    """Available stock was put on hold."""

    __version__ = "v1"

    inventory_item_id = Identifier(required=True)
    sku = String(required=True)
    quantity = Integer(required=True)
    new_reserved = Integer(required=True)
    new_available = Integer(required=True)
    reason = String()
    actor = String()
    reserved_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class ReservedStockReleased:
    """A hold was (partially) released back to available stock."""

    __version__ = "v1"

    inventory_item_id = Identifier(required=True)
    sku = String(required=True)
    requested = Integer(required=True)
    released = Integer(required=True)
    new_reserved = Integer(required=True)
    new_available = Integer(required=True)
    reason = String()
    actor = String()
    released_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class StockAlertRaised:
    """An alert fired after its re-alert interval had elapsed."""

    __version__ = "v1"

    inventory_item_id = Identifier(required=True)
    sku = String(required=True)
    kind = String(required=True)
    priority = String(required=True)
    message = String(required=True)
    raised_at = DateTime(required=True)


@inventory.event(part_of="InventoryItem")
class ItemStatusChanged:
    """The item status changed, either derived from stock or by an operator."""

    __version__ = "v1"

    inventory_item_id = Identifier(required=True)
    sku = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    reason = String()
    changed_at = DateTime(required=True)
