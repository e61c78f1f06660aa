"""Runtime tunables for dispatch, read from the environment."""

import os

# Route optimization estimates
AVERAGE_SPEED_KMH = float(os.environ.get("ROUTE_AVERAGE_SPEED_KMH", "50"))
FUEL_EFFICIENCY_KM_PER_L = float(os.environ.get("ROUTE_FUEL_EFFICIENCY_KM_PER_L", "10"))
FUEL_PRICE_PER_L = float(os.environ.get("ROUTE_FUEL_PRICE_PER_L", "1.2"))

# Bounded embedded logs; projections keep the full history
PATH_SAMPLE_LIMIT = int(os.environ.get("ROUTE_PATH_SAMPLE_LIMIT", "500"))
ORDER_HISTORY_LIMIT = int(os.environ.get("ORDER_HISTORY_LIMIT", "100"))

ORDER_NUMBER_MAX_ATTEMPTS = int(os.environ.get("ORDER_NUMBER_MAX_ATTEMPTS", "5"))

# An order whose estimate is this close is reported as "due-soon"
DUE_SOON_HOURS = 2
