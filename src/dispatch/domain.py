"""Dispatch bounded context — orders, fleet vehicles and delivery routes.

Owns the Order lifecycle, the Route lifecycle with its waypoints and tracking
path, and the Vehicle record the core is the sole writer of status for. The
assignment coordinator is the only place that changes more than one of these
aggregates in a single unit of work.
"""

import structlog
from protean.domain import Domain

dispatch = Domain(name="dispatch")

logger = structlog.get_logger(__name__)
