"""Stock movement log — the full, append-only ledger of stock changes.

The InventoryItem aggregate only keeps a recent window of movements; this
projection keeps every entry, reservations included.
"""

import uuid

from protean.core.projector import on
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.events import ReservedStockReleased, StockMovementRecorded, StockReserved
from inventory.stock.stock import InventoryItem


@inventory.projection
class StockMovementLog:
    entry_id = Identifier(identifier=True, required=True)
    inventory_item_id = Identifier(required=True)
    sku = String(required=True)
    entry_type = String(required=True)
    description = String(required=True)
    quantity_change = Integer(default=0)
    current_after = Integer()
    available_after = Integer(default=0)
    actor = String()
    reference = String()
    occurred_at = DateTime(required=True)


def _add_entry(event, entry_type, description, occurred_at, quantity_change=0, current_after=None, reference=None):
    current_domain.repository_for(StockMovementLog).add(
        StockMovementLog(
            entry_id=str(uuid.uuid4()),
            inventory_item_id=event.inventory_item_id,
            sku=event.sku,
            entry_type=entry_type,
            description=description,
            quantity_change=quantity_change,
            current_after=current_after,
            available_after=event.new_available,
            actor=event.actor,
            reference=reference,
            occurred_at=occurred_at,
        )
    )


@inventory.projector(projector_for=StockMovementLog, aggregates=[InventoryItem])
class StockMovementLogProjector:
    @on(StockMovementRecorded)
    def on_movement_recorded(self, event):
        _add_entry(
            event,
            event.movement_type,
            f"{event.movement_type} of {event.quantity} units: {event.reason or 'no reason given'}",
            event.recorded_at,
            quantity_change=event.effect,
            current_after=event.new_current,
            reference=event.reference,
        )

    @on(StockReserved)
    def on_stock_reserved(self, event):
        _add_entry(
            event,
            "reserved",
            f"Reserved {event.quantity} units: {event.reason or 'no reason given'}",
            event.reserved_at,
        )

    @on(ReservedStockReleased)
    def on_reserved_stock_released(self, event):
        _add_entry(
            event,
            "released",
            f"Released {event.released} of {event.requested} requested units: {event.reason or 'no reason given'}",
            event.released_at,
        )
