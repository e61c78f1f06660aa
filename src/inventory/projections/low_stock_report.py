"""Low stock report — items whose derived status is low-stock or out-of-stock."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Identifier, String
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.events import ItemStatusChanged
from inventory.stock.stock import InventoryItem, ItemStatus

_REPORTED = {ItemStatus.LOW_STOCK.value, ItemStatus.OUT_OF_STOCK.value}


@inventory.projection
class LowStockReport:
    inventory_item_id = Identifier(identifier=True, required=True)
    sku = String(required=True)
    status = String(required=True)
    is_critical = Boolean(default=False)  # out of stock
    detected_at = DateTime()


@inventory.projector(projector_for=LowStockReport, aggregates=[InventoryItem])
class LowStockReportProjector:
    @on(ItemStatusChanged)
    def on_status_changed(self, event):
        repo = current_domain.repository_for(LowStockReport)
        try:
            report = repo.get(event.inventory_item_id)
        except ObjectNotFoundError:
            report = None

        if event.new_status not in _REPORTED:
            if report is not None:
                repo._dao.delete(report)
            return

        if report is None:
            report = LowStockReport(
                inventory_item_id=event.inventory_item_id,
                sku=event.sku,
                status=event.new_status,
            )
        report.status = event.new_status
        report.is_critical = event.new_status == ItemStatus.OUT_OF_STOCK.value
        report.detected_at = event.changed_at
        repo.add(report)
