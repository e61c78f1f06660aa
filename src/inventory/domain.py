"""Inventory bounded context — the stock ledger.

Tracks stock per SKU: movements in and out, reservations held against
available stock, derived item status, and threshold alerts. Uses CQRS so that
items can be queried by SKU and each item carries its own bounded movement
window; the full ledger lives in the stock movement log projection.
"""

import structlog
from protean.domain import Domain

inventory = Domain(name="inventory")

logger = structlog.get_logger(__name__)
