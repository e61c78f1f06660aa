"""Stock alert log — every alert that fired, for notification follow-up."""

import uuid

from protean.core.projector import on
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.events import StockAlertRaised
from inventory.stock.stock import InventoryItem


@inventory.projection
class StockAlertLog:
    alert_id = Identifier(identifier=True, required=True)
    inventory_item_id = Identifier(required=True)
    sku = String(required=True)
    kind = String(required=True)
    priority = String(required=True)
    message = String(required=True)
    raised_at = DateTime(required=True)


@inventory.projector(projector_for=StockAlertLog, aggregates=[InventoryItem])
class StockAlertLogProjector:
    @on(StockAlertRaised)
    def on_alert_raised(self, event):
        current_domain.repository_for(StockAlertLog).add(
            StockAlertLog(
                alert_id=str(uuid.uuid4()),
                inventory_item_id=event.inventory_item_id,
                sku=event.sku,
                kind=event.kind,
                priority=event.priority,
                message=event.message,
                raised_at=event.raised_at,
            )
        )
