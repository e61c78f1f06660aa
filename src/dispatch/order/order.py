"""Order aggregate (CQRS) — a shipment request and its lifecycle.

State Machine:
    PENDING → CONFIRMED → PROCESSING → ASSIGNED → PICKED_UP → IN_TRANSIT
        → OUT_FOR_DELIVERY → DELIVERED
    any non-terminal → {CANCELLED, RETURNED, FAILED}

Moves along the main line go forward only, possibly skipping steps.
DELIVERED, CANCELLED, RETURNED and FAILED are terminal. ASSIGNED is entered
only through the assignment coordinator, which binds a driver and vehicle at
the same time.

The embedded status history is capped at ``ORDER_HISTORY_LIMIT`` entries;
the order timeline projection keeps every transition.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)
from shared.errors import InvalidTransition

from dispatch import config
from dispatch.domain import dispatch
from dispatch.order.events import (
    OrderAssigned,
    OrderAssignmentReleased,
    OrderCancelled,
    OrderCreated,
    OrderNoteAdded,
    OrderStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    ASSIGNED = "assigned"
    PICKED_UP = "picked-up"
    IN_TRANSIT = "in-transit"
    OUT_FOR_DELIVERY = "out-for-delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"
    FAILED = "failed"


class OrderPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class OrderType(Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"
    ROUND_TRIP = "round-trip"
    SCHEDULED = "scheduled"
    EXPRESS = "express"
    BULK = "bulk"
    FRAGILE = "fragile"
    PERISHABLE = "perishable"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class RefundStatus(Enum):
    NONE = "none"
    PENDING = "pending"


class DeliveryStatus(Enum):
    DELIVERED = "delivered"
    OVERDUE = "overdue"
    DUE_SOON = "due-soon"
    ON_TIME = "on-time"


_LIFECYCLE = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.ASSIGNED,
    OrderStatus.PICKED_UP,
    OrderStatus.IN_TRANSIT,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
]

_EXCEPTIONAL_ENDINGS = {OrderStatus.CANCELLED, OrderStatus.RETURNED, OrderStatus.FAILED}

TERMINAL_STATUSES = {OrderStatus.DELIVERED} | _EXCEPTIONAL_ENDINGS

ASSIGNABLE_STATUSES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """True when ``target`` is reachable from ``current`` in one step."""
    if current in TERMINAL_STATUSES:
        return False
    if target in _EXCEPTIONAL_ENDINGS:
        return True
    return _LIFECYCLE.index(target) > _LIFECYCLE.index(current)


def _as_utc(value: datetime | str | None) -> datetime | None:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@dispatch.value_object(part_of="Order")
class Stop:
    """A pickup or delivery location with its contact and time window."""

    name = String(max_length=200)
    address = String(required=True, max_length=500)
    latitude = Float(min_value=-90, max_value=90)
    longitude = Float(min_value=-180, max_value=180)
    contact_name = String(max_length=100)
    contact_phone = String(max_length=30)
    contact_email = String(max_length=254)
    window_start = DateTime()
    window_end = DateTime()
    instructions = String(max_length=500)


@dispatch.value_object(part_of="Order")
class CargoSummary:
    """Totals derived from the cargo lines."""

    total_weight = Float(default=0.0)
    total_volume = Float(default=0.0)
    total_value = Float(default=0.0)
    item_count = Integer(default=0)


@dispatch.value_object(part_of="Order")
class Pricing:
    base_price = Float(default=0.0)
    additional_charges = Float(default=0.0)
    discounts = Float(default=0.0)
    taxes = Float(default=0.0)
    total_amount = Float(default=0.0)
    currency = String(max_length=3, default="USD")
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)


@dispatch.value_object(part_of="Order")
class Location:
    latitude = Float()
    longitude = Float()
    address = String(max_length=500)
    recorded_at = DateTime()


@dispatch.value_object(part_of="Order")
class Cancellation:
    cancelled_at = DateTime(required=True)
    cancelled_by = String(max_length=100)
    reason = String(required=True, max_length=500)
    refund_amount = Float(default=0.0)
    refund_status = String(choices=RefundStatus, default=RefundStatus.NONE.value)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@dispatch.entity(part_of="Order")
class CargoLine:
    """One kind of goods in the shipment. Weight, volume and value are per unit."""

    name = String(required=True, max_length=200)
    sku = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    weight = Float(default=0.0, min_value=0)
    volume = Float(default=0.0, min_value=0)
    value = Float(default=0.0, min_value=0)
    fragile = Boolean(default=False)


@dispatch.entity(part_of="Order")
class StatusEntry:
    sequence = Integer(required=True)
    status = String(required=True, choices=OrderStatus)
    actor = String(max_length=100)
    notes = String(max_length=1000)
    latitude = Float()
    longitude = Float()
    address = String(max_length=500)
    automatic = Boolean(default=False)
    recorded_at = DateTime(required=True)


@dispatch.entity(part_of="Order")
class OrderNote:
    text = String(required=True, max_length=2000)
    author = String(max_length=100)
    private = Boolean(default=False)
    added_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@dispatch.aggregate
class Order:
    order_number = String(max_length=30, unique=True)
    tracking_number = String(max_length=20, unique=True)
    customer_id = Identifier(required=True)
    vendor_id = Identifier()
    driver_id = Identifier()
    vehicle_id = Identifier()
    route_id = Identifier()
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    priority = String(choices=OrderPriority, default=OrderPriority.MEDIUM.value)
    order_type = String(choices=OrderType, default=OrderType.DELIVERY.value)
    pickup = ValueObject(Stop)
    delivery = ValueObject(Stop)
    cargo_lines = HasMany(CargoLine)
    cargo = ValueObject(CargoSummary)
    special_instructions = Text()
    pricing = ValueObject(Pricing)
    status_history = HasMany(StatusEntry)
    history_count = Integer(default=0)
    notes = HasMany(OrderNote)
    last_location = ValueObject(Location)
    estimated_delivery_at = DateTime()
    actual_delivery_at = DateTime()
    cancellation = ValueObject(Cancellation)
    created_by = String(max_length=100)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_number: str,
        tracking_number: str,
        customer_id: str,
        pickup: dict,
        delivery: dict,
        cargo: list[dict],
        pricing: dict | None = None,
        transit_minutes: int | None = None,
        created_by: str | None = None,
        **details,
    ):
        """Build a validated order in ``pending``.

        ``cargo`` is a list of line dicts. ``pricing`` may omit
        ``total_amount``, in which case it is derived from the components.
        """
        errors = {}
        for role, data in (("pickup", pickup), ("delivery", delivery)):
            problems = _stop_problems(data)
            if problems:
                errors[role] = problems
        if not cargo:
            errors["cargo"] = ["At least one cargo line is required"]
        if errors:
            raise ValidationError(errors)

        lines = [CargoLine(**line) for line in cargo]
        summary = _summarize(lines)
        if summary.total_weight <= 0:
            raise ValidationError({"cargo": ["Total cargo weight must be greater than zero"]})

        now = datetime.now(UTC)
        order = cls(
            order_number=order_number,
            tracking_number=tracking_number,
            customer_id=customer_id,
            pickup=Stop(**pickup),
            delivery=Stop(**delivery),
            cargo=summary,
            pricing=_price(pricing or {}),
            created_by=created_by,
            created_at=now,
            updated_at=now,
            **details,
        )
        for line in lines:
            order.add_cargo_lines(line)
        if transit_minutes:
            order.estimate_delivery(transit_minutes)
        order._record(OrderStatus.PENDING, actor=created_by, notes="Order created", now=now)
        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                order_number=order_number,
                tracking_number=tracking_number,
                customer_id=str(customer_id),
                order_type=order.order_type,
                priority=order.priority,
                total_weight=summary.total_weight,
                total_amount=order.pricing.total_amount,
                created_by=created_by,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.current_status in TERMINAL_STATUSES

    def _record(
        self,
        status: OrderStatus,
        actor: str | None = None,
        notes: str | None = None,
        location: dict | None = None,
        automatic: bool = False,
        now: datetime | None = None,
    ) -> None:
        location = location or {}
        self.history_count = (self.history_count or 0) + 1
        self.add_status_history(
            StatusEntry(
                sequence=self.history_count,
                status=status.value,
                actor=actor,
                notes=notes,
                latitude=location.get("latitude"),
                longitude=location.get("longitude"),
                address=location.get("address"),
                automatic=automatic,
                recorded_at=now or datetime.now(UTC),
            )
        )
        overflow = len(self.status_history) - config.ORDER_HISTORY_LIMIT
        if overflow > 0:
            for old in sorted(self.status_history, key=lambda e: e.sequence)[:overflow]:
                self.remove_status_history(old)

    def history(self) -> list:
        """Status entries still held by the aggregate, oldest first."""
        return sorted(self.status_history or [], key=lambda e: e.sequence)

    def _transition(
        self,
        target: OrderStatus,
        actor: str | None = None,
        notes: str | None = None,
        location: dict | None = None,
        automatic: bool = False,
        now: datetime | None = None,
    ) -> None:
        current = self.current_status
        if not can_transition(current, target):
            raise InvalidTransition({"status": [f"Cannot transition order from {current.value} to {target.value}"]})

        now = now or datetime.now(UTC)
        self.status = target.value
        self._record(target, actor=actor, notes=notes, location=location, automatic=automatic, now=now)
        if location:
            self.last_location = Location(
                latitude=location.get("latitude"),
                longitude=location.get("longitude"),
                address=location.get("address"),
                recorded_at=now,
            )
        if target == OrderStatus.DELIVERED:
            self.actual_delivery_at = now
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=current.value,
                new_status=target.value,
                actor=actor,
                notes=notes,
                automatic=automatic,
                latitude=location.get("latitude") if location else None,
                longitude=location.get("longitude") if location else None,
                address=location.get("address") if location else None,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def update_status(
        self,
        new_status: str,
        actor: str | None = None,
        notes: str | None = None,
        location: dict | None = None,
    ) -> None:
        """Move the order along its lifecycle.

        Cancellation goes through ``cancel`` and assignment through the
        assignment coordinator, both of which record more than a status.
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status {new_status!r}"]}) from None
        if target == OrderStatus.ASSIGNED:
            raise InvalidTransition({"status": ["Orders are assigned by binding a driver and vehicle"]})
        if target == OrderStatus.CANCELLED:
            raise InvalidTransition({"status": ["Use cancellation to cancel an order"]})
        self._transition(target, actor=actor, notes=notes, location=location)

    def assert_assignable(self) -> None:
        """Pending and confirmed orders, or an ``assigned`` order whose binding was released."""
        if self.current_status in ASSIGNABLE_STATUSES:
            return
        if self.current_status == OrderStatus.ASSIGNED and not self.vehicle_id:
            return
        raise InvalidTransition({"status": [f"Cannot assign an order in {self.status} status"]})

    def assign(self, driver_id: str, vehicle_id: str, route_id: str | None = None) -> None:
        """Bind driver and vehicle and move to ``assigned`` (automatic entry)."""
        self.assert_assignable()
        now = datetime.now(UTC)
        self.driver_id = driver_id
        self.vehicle_id = vehicle_id
        self.route_id = route_id or None
        notes = f"Assigned to driver {driver_id} with vehicle {vehicle_id}"
        if self.current_status == OrderStatus.ASSIGNED:
            self._record(OrderStatus.ASSIGNED, actor="system", notes=notes, automatic=True, now=now)
            self.updated_at = now
        else:
            self._transition(OrderStatus.ASSIGNED, actor="system", notes=notes, automatic=True, now=now)
        self.raise_(
            OrderAssigned(
                order_id=str(self.id),
                order_number=self.order_number,
                driver_id=str(driver_id),
                vehicle_id=str(vehicle_id),
                route_id=str(route_id) if route_id else None,
                assigned_at=now,
            )
        )

    def release_binding(self, reason: str) -> bool:
        """Drop driver, vehicle and route so the order can be dispatched again.

        Only an ``assigned`` order is unbound; once picked up the binding is
        part of the delivery record. Returns False when there was nothing to do.
        """
        if self.current_status != OrderStatus.ASSIGNED or not self.vehicle_id:
            return False
        now = datetime.now(UTC)
        driver_id, vehicle_id, route_id = self.driver_id, self.vehicle_id, self.route_id
        self.driver_id = None
        self.vehicle_id = None
        self.route_id = None
        self._record(OrderStatus.ASSIGNED, actor="system", notes=reason, automatic=True, now=now)
        self.updated_at = now
        self.raise_(
            OrderAssignmentReleased(
                order_id=str(self.id),
                order_number=self.order_number,
                driver_id=str(driver_id) if driver_id else None,
                vehicle_id=str(vehicle_id),
                route_id=str(route_id) if route_id else None,
                reason=reason,
                released_at=now,
            )
        )
        return True

    def cancel(self, reason: str, actor: str | None = None) -> float:
        """Cancel the order; returns the refund amount.

        A pending order is refunded in full, later orders get nothing back.
        """
        current = self.current_status
        if current in TERMINAL_STATUSES:
            raise InvalidTransition({"status": [f"Cannot cancel an order in {current.value} status"]})

        refund = self.pricing.total_amount if current == OrderStatus.PENDING and self.pricing else 0.0
        now = datetime.now(UTC)
        self.cancellation = Cancellation(
            cancelled_at=now,
            cancelled_by=actor,
            reason=reason,
            refund_amount=refund,
            refund_status=RefundStatus.PENDING.value if refund > 0 else RefundStatus.NONE.value,
        )
        self._transition(OrderStatus.CANCELLED, actor=actor, notes=reason, now=now)
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=current.value,
                reason=reason,
                cancelled_by=actor,
                refund_amount=refund,
                cancelled_at=now,
            )
        )
        return refund

    # -------------------------------------------------------------------
    # Notes and estimates
    # -------------------------------------------------------------------
    def add_note(self, text: str, author: str | None = None, private: bool = False) -> None:
        if not text or not text.strip():
            raise ValidationError({"text": ["Note text is required"]})
        now = datetime.now(UTC)
        self.add_notes(OrderNote(text=text, author=author, private=private, added_at=now))
        self.updated_at = now
        self.raise_(
            OrderNoteAdded(
                order_id=str(self.id),
                author=author,
                text=text,
                private=private,
                added_at=now,
            )
        )

    def estimate_delivery(self, transit_minutes: int) -> None:
        """Estimated delivery is the end of the pickup window plus transit time."""
        start = _as_utc(self.pickup.window_end or self.pickup.window_start) if self.pickup else None
        base = start or datetime.now(UTC)
        self.estimated_delivery_at = base + timedelta(minutes=transit_minutes)

    def delivery_status(self, now: datetime | None = None) -> str:
        if self.current_status == OrderStatus.DELIVERED:
            return DeliveryStatus.DELIVERED.value
        estimate = _as_utc(self.estimated_delivery_at)
        if estimate:
            now = now or datetime.now(UTC)
            if now > estimate:
                return DeliveryStatus.OVERDUE.value
            if estimate - now <= timedelta(hours=config.DUE_SOON_HOURS):
                return DeliveryStatus.DUE_SOON.value
        return DeliveryStatus.ON_TIME.value


# ---------------------------------------------------------------------------
# Creation helpers
# ---------------------------------------------------------------------------
def _stop_problems(data: dict | None) -> list[str]:
    if not data:
        return ["Stop details are required"]
    problems = []
    if not data.get("address"):
        problems.append("Address is required")
    if not data.get("contact_name") or not data.get("contact_phone"):
        problems.append("Contact name and phone are required")
    lat, lng = data.get("latitude"), data.get("longitude")
    if lat is not None and not -90 <= lat <= 90:
        problems.append("Latitude must be between -90 and 90")
    if lng is not None and not -180 <= lng <= 180:
        problems.append("Longitude must be between -180 and 180")
    start, end = _as_utc(data.get("window_start")), _as_utc(data.get("window_end"))
    if start and end and start >= end:
        problems.append("Time window start must be before its end")
    return problems


def _summarize(lines: list[CargoLine]) -> CargoSummary:
    return CargoSummary(
        total_weight=sum(line.quantity * (line.weight or 0.0) for line in lines),
        total_volume=sum(line.quantity * (line.volume or 0.0) for line in lines),
        total_value=sum(line.quantity * (line.value or 0.0) for line in lines),
        item_count=sum(line.quantity for line in lines),
    )


def _price(data: dict) -> Pricing:
    base = data.get("base_price") or 0.0
    charges = data.get("additional_charges") or 0.0
    discounts = data.get("discounts") or 0.0
    taxes = data.get("taxes") or 0.0
    total = data.get("total_amount")
    if total is None:
        total = base + charges - discounts + taxes
    if total < 0:
        raise ValidationError({"pricing": ["Total amount cannot be negative"]})
    return Pricing(
        base_price=base,
        additional_charges=charges,
        discounts=discounts,
        taxes=taxes,
        total_amount=total,
        currency=data.get("currency") or "USD",
        payment_status=data.get("payment_status") or PaymentStatus.PENDING.value,
    )
