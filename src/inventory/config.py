"""Runtime tunables for the inventory ledger, read from the environment."""

import os
from datetime import timedelta

# Recent movements kept inside each InventoryItem; older ones live only in
# the StockMovementLog projection.
LEDGER_WINDOW = int(os.environ.get("INVENTORY_LEDGER_WINDOW", "200"))

DEFAULT_REORDER_POINT = int(os.environ.get("INVENTORY_DEFAULT_REORDER_POINT", "10"))
DEFAULT_EXPIRY_LEAD_DAYS = 30
URGENT_EXPIRY_DAYS = 7

# Minimum time between two alerts of the same kind for one item
LOW_STOCK_REALERT = timedelta(days=1)
EXPIRATION_REALERT = timedelta(days=1)
OVERSTOCK_REALERT = timedelta(days=7)
