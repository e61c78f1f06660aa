"""Outbound event handler — forwards ledger events to the event sink.

Runs after the unit of work commits. Sink failures are logged by
``shared.sink.forwarding.forward`` and never reach the caller.
"""

from protean.utils.mixins import handle
from shared.sink.forwarding import forward

from inventory.domain import inventory
from inventory.stock.events import (
    ItemRegistered,
    ItemStatusChanged,
    ReservedStockReleased,
    StockAlertRaised,
    StockMovementRecorded,
    StockReserved,
)
from inventory.stock.stock import InventoryItem


@inventory.event_handler(part_of=InventoryItem)
class InventoryEventForwarder:
    """Hands inventory events to the configured event sink."""

    @handle(ItemRegistered)
    def on_item_registered(self, event: ItemRegistered) -> None:
        forward(event, "InventoryItem", event.inventory_item_id)

    @handle(StockMovementRecorded)
    def on_movement_recorded(self, event: StockMovementRecorded) -> None:
        forward(event, "InventoryItem", event.inventory_item_id)

    @handle(StockReserved)
    def on_stock_reserved(self, event: StockReserved) -> None:
        forward(event, "InventoryItem", event.inventory_item_id)

    @handle(ReservedStockReleased)
    def on_reserved_stock_released(self, event: ReservedStockReleased) -> None:
        forward(event, "InventoryItem", event.inventory_item_id)

    @handle(StockAlertRaised)
    def on_alert_raised(self, event: StockAlertRaised) -> None:
        forward(event, "InventoryItem", event.inventory_item_id)

    @handle(ItemStatusChanged)
    def on_status_changed(self, event: ItemStatusChanged) -> None:
        forward(event, "InventoryItem", event.inventory_item_id)
