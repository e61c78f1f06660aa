"""InventoryItem aggregate (CQRS) — the core of the inventory ledger.

Every change to physical stock is a movement appended to the item's ledger;
reservations hold stock against ``available`` without touching ``current``.
The item status is never set from outside for stock reasons: it is derived
from the stock levels after every mutation.

Stock Level Model:
    current:   physical count on hand
    reserved:  held for orders, still physically present
    available: current - reserved, what can still be allocated

Invariant: available == current - reserved >= 0 and current >= 0.

Movement kinds:
    increase:  in, adjustment (positive)
    decrease:  out, damaged, expired, lost, adjustment (negative)
    neutral:   transfer (ledger entry only)
"""

from datetime import UTC, date, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    Date,
    DateTime,
    HasMany,
    Integer,
    String,
    ValueObject,
)
from shared.errors import InsufficientStock, InvalidTransition

from inventory import config
from inventory.domain import inventory
from inventory.stock.events import (
    ItemRegistered,
    ItemStatusChanged,
    ReservedStockReleased,
    StockAlertRaised,
    StockMovementRecorded,
    StockReserved,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ItemStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DISCONTINUED = "discontinued"
    OUT_OF_STOCK = "out-of-stock"
    LOW_STOCK = "low-stock"


class MovementType(Enum):
    IN = "in"
    OUT = "out"
    TRANSFER = "transfer"
    ADJUSTMENT = "adjustment"
    DAMAGED = "damaged"
    EXPIRED = "expired"
    LOST = "lost"


class AlertKind(Enum):
    LOW_STOCK = "low-stock"
    EXPIRATION = "expiration"
    OVERSTOCK = "overstock"


class AlertPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


_DECREASE_KINDS = {
    MovementType.OUT,
    MovementType.DAMAGED,
    MovementType.EXPIRED,
    MovementType.LOST,
}

# Statuses an operator sets; stock changes never override them
_MANUAL_STATUSES = {ItemStatus.INACTIVE, ItemStatus.DISCONTINUED}


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@inventory.value_object(part_of="InventoryItem")
class StockLevels:
    """Stock quantities and thresholds.

    Available is denormalized for query convenience and always equals
    current - reserved.
    """

    current = Integer(default=0)
    reserved = Integer(default=0)
    available = Integer(default=0)
    minimum = Integer(default=0)
    maximum = Integer()
    reorder_point = Integer(default=config.DEFAULT_REORDER_POINT)


@inventory.value_object(part_of="InventoryItem")
class StockAnalytics:
    """Running totals over the whole ledger, including trimmed entries."""

    total_in = Integer(default=0)
    total_out = Integer(default=0)
    last_movement_at = DateTime()
    last_sold_at = DateTime()


@inventory.value_object(part_of="InventoryItem")
class AlertSettings:
    """Which alerts are enabled and the thresholds they use.

    Empty thresholds fall back to the stock reorder point (low stock) and
    maximum (overstock).
    """

    low_stock_enabled = Boolean(default=True)
    low_stock_threshold = Integer()
    expiration_enabled = Boolean(default=True)
    expiration_lead_days = Integer(default=config.DEFAULT_EXPIRY_LEAD_DAYS)
    overstock_enabled = Boolean(default=True)
    overstock_threshold = Integer()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@inventory.entity(part_of="InventoryItem")
class StockMovement:
    """One ledger entry. ``effect`` is the signed change applied to current."""

    sequence = Integer(required=True, min_value=1)
    movement_type = String(required=True, max_length=20, choices=MovementType)
    quantity = Integer(required=True, min_value=1)
    effect = Integer(required=True)
    balance_after = Integer(required=True)
    reason = String(max_length=500)
    actor = String(max_length=100)
    reference = String(max_length=255)
    notes = String(max_length=1000)
    recorded_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@inventory.aggregate
class InventoryItem:
    sku = String(required=True, max_length=50, unique=True)
    name = String(required=True, max_length=200)
    description = String(max_length=1000)
    category = String(max_length=100)
    unit = String(max_length=20, default="unit")
    location = String(max_length=100)
    status = String(
        max_length=20,
        choices=ItemStatus,
        default=ItemStatus.ACTIVE.value,
    )
    stock = ValueObject(StockLevels)
    analytics = ValueObject(StockAnalytics)
    alert_settings = ValueObject(AlertSettings)
    movements = HasMany(StockMovement)
    movement_count = Integer(default=0)
    expires_on = Date()
    low_stock_alerted_at = DateTime()
    expiration_alerted_at = DateTime()
    overstock_alerted_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_levels_must_balance(self):
        if self.stock is None:
            return
        if self.stock.current < 0 or self.stock.reserved < 0:
            raise ValidationError({"stock": ["Stock quantities cannot be negative"]})
        if self.stock.available != self.stock.current - self.stock.reserved:
            raise ValidationError({"stock": ["Available stock must equal current minus reserved"]})
        if self.stock.available < 0:
            raise ValidationError({"stock": ["Reserved stock cannot exceed current stock"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        sku: str,
        name: str,
        opening_quantity: int = 0,
        reorder_point: int = config.DEFAULT_REORDER_POINT,
        minimum: int = 0,
        maximum: int | None = None,
        actor: str | None = None,
        alert_settings: dict | None = None,
        **details,
    ):
        """Register a new SKU. Opening stock is recorded as an ``in`` movement."""
        if opening_quantity < 0:
            raise ValidationError({"opening_quantity": ["Opening quantity cannot be negative"]})
        if maximum is not None and maximum < reorder_point:
            raise ValidationError({"maximum": ["Maximum stock cannot be below the reorder point"]})

        now = datetime.now(UTC)
        item = cls(
            sku=sku,
            name=name,
            stock=StockLevels(
                current=0,
                reserved=0,
                available=0,
                minimum=minimum,
                maximum=maximum,
                reorder_point=reorder_point,
            ),
            analytics=StockAnalytics(total_in=0, total_out=0),
            alert_settings=AlertSettings(**(alert_settings or {})),
            created_at=now,
            updated_at=now,
            **details,
        )
        item.raise_(
            ItemRegistered(
                inventory_item_id=str(item.id),
                sku=sku,
                name=name,
                reorder_point=reorder_point,
                maximum=maximum,
                registered_at=now,
            )
        )
        if opening_quantity:
            item.add_movement(MovementType.IN.value, opening_quantity, reason="Opening balance", actor=actor)
        else:
            item._refresh_status(reason="Registered without stock")
        return item

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def available(self) -> int:
        return self.stock.available if self.stock else 0

    def _replace_levels(self, current: int, reserved: int) -> None:
        self.stock = StockLevels(
            current=current,
            reserved=reserved,
            available=current - reserved,
            minimum=self.stock.minimum,
            maximum=self.stock.maximum,
            reorder_point=self.stock.reorder_point,
        )

    def _stock_status(self) -> ItemStatus:
        if self.stock.available <= 0:
            return ItemStatus.OUT_OF_STOCK
        if self.stock.available <= self.stock.reorder_point:
            return ItemStatus.LOW_STOCK
        return ItemStatus.ACTIVE

    def _derived_status(self) -> ItemStatus:
        current = ItemStatus(self.status)
        if current in _MANUAL_STATUSES:
            return current
        return self._stock_status()

    def _set_status(self, new_status: ItemStatus, reason: str, now: datetime | None = None) -> None:
        previous = self.status
        if previous == new_status.value:
            return
        now = now or datetime.now(UTC)
        self.status = new_status.value
        self.raise_(
            ItemStatusChanged(
                inventory_item_id=str(self.id),
                sku=self.sku,
                previous_status=previous,
                new_status=new_status.value,
                reason=reason,
                changed_at=now,
            )
        )

    def _refresh_status(self, reason: str = "Stock level changed", now: datetime | None = None) -> None:
        self._set_status(self._derived_status(), reason, now)

    def _append_movement(self, movement: StockMovement) -> None:
        self.add_movements(movement)
        overflow = len(self.movements) - config.LEDGER_WINDOW
        if overflow > 0:
            for old in sorted(self.movements, key=lambda m: m.sequence)[:overflow]:
                self.remove_movements(old)

    def recent_movements(self) -> list:
        """Ledger entries still held by the aggregate, oldest first."""
        return sorted(self.movements or [], key=lambda m: m.sequence)

    # -------------------------------------------------------------------
    # Movements
    # -------------------------------------------------------------------
    def add_movement(
        self,
        movement_type: str,
        quantity: int,
        reason: str | None = None,
        actor: str | None = None,
        reference: str | None = None,
        notes: str | None = None,
    ) -> StockMovement:
        """Append a movement and apply its effect to current stock.

        ``quantity`` must be positive, except for adjustments where its sign
        gives the direction. Decreases that would leave available stock below
        zero are rejected before anything changes.
        """
        try:
            kind = MovementType(movement_type)
        except ValueError:
            raise ValidationError({"movement_type": [f"Unknown movement type: {movement_type}"]}) from None

        if kind == MovementType.ADJUSTMENT:
            if not quantity:
                raise ValidationError({"quantity": ["Adjustment quantity cannot be zero"]})
            effect = quantity
        else:
            if quantity <= 0:
                raise ValidationError({"quantity": ["Quantity must be positive"]})
            if kind == MovementType.TRANSFER:
                effect = 0
            elif kind in _DECREASE_KINDS:
                effect = -quantity
            else:
                effect = quantity

        previous_current = self.stock.current
        new_current = previous_current + effect
        if effect < 0 and -effect > self.stock.available:
            raise InsufficientStock(
                {
                    "quantity": [
                        f"Cannot remove {-effect} units of {self.sku}: only {self.stock.available} available"
                    ]
                }
            )

        now = datetime.now(UTC)
        magnitude = abs(quantity)
        with atomic_change(self):
            self.movement_count = (self.movement_count or 0) + 1
            movement = StockMovement(
                sequence=self.movement_count,
                movement_type=kind.value,
                quantity=magnitude,
                effect=effect,
                balance_after=new_current,
                reason=reason,
                actor=actor,
                reference=reference,
                notes=notes,
                recorded_at=now,
            )
            self._append_movement(movement)
            self._replace_levels(new_current, self.stock.reserved)

            analytics = self.analytics or StockAnalytics()
            self.analytics = StockAnalytics(
                total_in=(analytics.total_in or 0) + max(effect, 0),
                total_out=(analytics.total_out or 0) + max(-effect, 0),
                last_movement_at=now,
                last_sold_at=now if kind == MovementType.OUT else analytics.last_sold_at,
            )
            self.updated_at = now

        self.raise_(
            StockMovementRecorded(
                inventory_item_id=str(self.id),
                sku=self.sku,
                movement_id=str(movement.id),
                movement_type=kind.value,
                quantity=magnitude,
                effect=effect,
                previous_current=previous_current,
                new_current=new_current,
                new_available=self.stock.available,
                reason=reason,
                actor=actor,
                reference=reference,
                recorded_at=now,
            )
        )
        self._refresh_status(now=now)
        return movement

    # -------------------------------------------------------------------
    # Reservations
    # -------------------------------------------------------------------
    def reserve(self, quantity: int, reason: str | None = None, actor: str | None = None) -> None:
        """Hold ``quantity`` units against available stock."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if ItemStatus(self.status) in _MANUAL_STATUSES:
            raise InvalidTransition({"status": [f"Cannot reserve stock of a {self.status} item"]})
        if quantity > self.stock.available:
            raise InsufficientStock(
                {"quantity": [f"Cannot reserve {quantity} units of {self.sku}: only {self.stock.available} available"]}
            )

        now = datetime.now(UTC)
        self._replace_levels(self.stock.current, self.stock.reserved + quantity)
        self.updated_at = now
        self.raise_(
            StockReserved(
                inventory_item_id=str(self.id),
                sku=self.sku,
                quantity=quantity,
                new_reserved=self.stock.reserved,
                new_available=self.stock.available,
                reason=reason,
                actor=actor,
                reserved_at=now,
            )
        )
        self._refresh_status(now=now)

    def release_reserved(self, quantity: int, reason: str | None = None, actor: str | None = None) -> int:
        """Release up to ``quantity`` reserved units; returns how many were released."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        released = min(quantity, self.stock.reserved)
        if released == 0:
            return 0

        now = datetime.now(UTC)
        self._replace_levels(self.stock.current, self.stock.reserved - released)
        self.updated_at = now
        self.raise_(
            ReservedStockReleased(
                inventory_item_id=str(self.id),
                sku=self.sku,
                requested=quantity,
                released=released,
                new_reserved=self.stock.reserved,
                new_available=self.stock.available,
                reason=reason,
                actor=actor,
                released_at=now,
            )
        )
        self._refresh_status(now=now)
        return released

    # -------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------
    def days_until_expiration(self, today: date | None = None) -> int | None:
        if not self.expires_on:
            return None
        today = today or datetime.now(UTC).date()
        return (self.expires_on - today).days

    @staticmethod
    def _gate_open(last_alerted: datetime | None, interval, now: datetime) -> bool:
        last_alerted = _as_utc(last_alerted)
        return last_alerted is None or now - last_alerted >= interval

    def check_alerts(self, now: datetime | None = None) -> list[dict]:
        """Evaluate thresholds and return the alerts that fire now.

        Each kind has its own re-alert interval; the last-alerted timestamp of
        a kind moves only when that kind actually fires.
        """
        now = _as_utc(now) or datetime.now(UTC)
        settings = self.alert_settings or AlertSettings()
        alerts = []

        low_threshold = settings.low_stock_threshold
        if low_threshold is None:
            low_threshold = self.stock.reorder_point
        if (
            settings.low_stock_enabled
            and self.stock.available <= low_threshold
            and self._gate_open(self.low_stock_alerted_at, config.LOW_STOCK_REALERT, now)
        ):
            alerts.append(
                {
                    "kind": AlertKind.LOW_STOCK.value,
                    "priority": AlertPriority.HIGH.value,
                    "message": f"Low stock alert for {self.name} ({self.sku}). Available: {self.stock.available} units",
                }
            )
            self.low_stock_alerted_at = now

        days_left = self.days_until_expiration(now.date())
        lead_days = settings.expiration_lead_days
        if lead_days is None:
            lead_days = config.DEFAULT_EXPIRY_LEAD_DAYS
        if (
            settings.expiration_enabled
            and days_left is not None
            and days_left <= lead_days
            and self._gate_open(self.expiration_alerted_at, config.EXPIRATION_REALERT, now)
        ):
            priority = AlertPriority.URGENT if days_left <= config.URGENT_EXPIRY_DAYS else AlertPriority.MEDIUM
            alerts.append(
                {
                    "kind": AlertKind.EXPIRATION.value,
                    "priority": priority.value,
                    "message": f"{self.name} ({self.sku}) expires in {days_left} days",
                }
            )
            self.expiration_alerted_at = now

        over_threshold = settings.overstock_threshold
        if over_threshold is None:
            over_threshold = self.stock.maximum
        if (
            settings.overstock_enabled
            and self.stock.maximum is not None
            and self.stock.current >= over_threshold
            and self._gate_open(self.overstock_alerted_at, config.OVERSTOCK_REALERT, now)
        ):
            alerts.append(
                {
                    "kind": AlertKind.OVERSTOCK.value,
                    "priority": AlertPriority.LOW.value,
                    "message": f"Overstock alert for {self.name} ({self.sku}). Current: {self.stock.current} units",
                }
            )
            self.overstock_alerted_at = now

        for alert in alerts:
            self.raise_(
                StockAlertRaised(
                    inventory_item_id=str(self.id),
                    sku=self.sku,
                    kind=alert["kind"],
                    priority=alert["priority"],
                    message=alert["message"],
                    raised_at=now,
                )
            )
        return alerts

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def deactivate(self, reason: str | None = None) -> None:
        """Take the item out of circulation. Items are never deleted."""
        current = ItemStatus(self.status)
        if current == ItemStatus.DISCONTINUED:
            raise InvalidTransition({"status": ["A discontinued item cannot be deactivated"]})
        self._set_status(ItemStatus.INACTIVE, reason or "Deactivated")
        self.updated_at = datetime.now(UTC)

    def reactivate(self) -> None:
        if ItemStatus(self.status) != ItemStatus.INACTIVE:
            raise InvalidTransition({"status": [f"Cannot reactivate an item in {self.status} status"]})
        self._set_status(self._stock_status(), "Reactivated")
        self.updated_at = datetime.now(UTC)

    def discontinue(self, reason: str | None = None) -> None:
        if ItemStatus(self.status) == ItemStatus.DISCONTINUED:
            raise InvalidTransition({"status": ["Item is already discontinued"]})
        if self.stock.reserved > 0:
            raise ValidationError({"stock": ["Release reserved stock before discontinuing the item"]})
        self._set_status(ItemStatus.DISCONTINUED, reason or "Discontinued")
        self.updated_at = datetime.now(UTC)
