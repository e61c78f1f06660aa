"""Order and tracking number allocation.

Numbers are drawn from uuid4 rather than the clock, checked against the
repository and retried on a collision. The ``unique=True`` fields on the
Order aggregate back this up at the storage layer.
"""

from datetime import UTC, datetime
from uuid import uuid4

import structlog
from protean.utils.globals import current_domain
from shared.errors import Conflict

from dispatch import config

logger = structlog.get_logger(__name__)


def _order_number(today) -> str:
    return f"ORD-{today:%Y%m%d}-{uuid4().hex[:8].upper()}"


def _tracking_number() -> str:
    return f"TRK{uuid4().hex[:12].upper()}"


def allocate_numbers(order_cls) -> tuple[str, str]:
    """Return an unused ``(order_number, tracking_number)`` pair."""
    repo = current_domain.repository_for(order_cls)
    today = datetime.now(UTC).date()
    for attempt in range(1, config.ORDER_NUMBER_MAX_ATTEMPTS + 1):
        order_number = _order_number(today)
        tracking_number = _tracking_number()
        if repo.find_by_order_number(order_number) is None and repo.find_by_tracking_number(tracking_number) is None:
            return order_number, tracking_number
        logger.warning("Order number collision, retrying", attempt=attempt)
    raise Conflict("Could not allocate a unique order number")
