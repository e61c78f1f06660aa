"""Stock alerts — command and handler.

CheckAlerts evaluates the low-stock, expiration and overstock thresholds of
one item. Only alerts whose re-alert interval has elapsed fire, and only
those move their last-alerted timestamp.
"""

import structlog
from protean import handle
from protean.fields import DateTime, Identifier
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.stock import InventoryItem

logger = structlog.get_logger(__name__)


@inventory.command(part_of="InventoryItem")
class CheckAlerts:
    """Evaluate alert thresholds for an item."""

    inventory_item_id = Identifier(required=True)
    as_of = DateTime()  # Optional: defaults to now


@inventory.command_handler(part_of=InventoryItem)
class AlertsHandler:
    @handle(CheckAlerts)
    def check_alerts(self, command):
        repo = current_domain.repository_for(InventoryItem)
        item = repo.get(command.inventory_item_id)
        alerts = item.check_alerts(now=command.as_of)
        if alerts:
            repo.add(item)
            logger.info(
                "Stock alerts fired",
                sku=item.sku,
                kinds=[a["kind"] for a in alerts],
            )
        return alerts
