"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared across
users. State tracks ids returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class OrderState:
    """Tracks state for a single delivery order lifecycle."""

    order_id: str | None = None
    order_number: str | None = None
    tracking_number: str | None = None
    current_status: str = "pending"
    total_amount: float = 0.0


@dataclass
class RouteState:
    """Tracks state for a single route lifecycle."""

    route_id: str | None = None
    waypoint_ids: list[str] = field(default_factory=list)
    current_status: str = "draft"


@dataclass
class VehicleState:
    vehicle_id: str | None = None
    current_status: str = "available"


@dataclass
class InventoryState:
    """Tracks state for an inventory item lifecycle."""

    inventory_item_id: str | None = None
    sku: str | None = None
    current: int = 0
    reserved: int = 0

    @property
    def available(self) -> int:
        return self.current - self.reserved
