"""Vehicle aggregate (CQRS) — the fleet record dispatch is allowed to write.

Only availability is owned here: ``status``, the assigned driver and the
order/route currently holding the vehicle, plus trip metrics folded in when
a route completes. Everything else about a vehicle lives with fleet
management.

Status Model:
    AVAILABLE ⇄ {MAINTENANCE, OUT_OF_SERVICE}       operator changes
    AVAILABLE → ASSIGNED                              assignment (claim)
    ASSIGNED ⇄ LOADING, ASSIGNED/LOADING → IN_TRANSIT route start
    IN_TRANSIT ⇄ UNLOADING                            operator changes
    any held status → AVAILABLE                       release / route end
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, ValueObject
from shared.errors import InvalidTransition, VehicleUnavailable

from dispatch.domain import dispatch
from dispatch.vehicle.events import VehicleRegistered, VehicleStatusChanged, VehicleTripRecorded


class VehicleStatus(Enum):
    AVAILABLE = "available"
    ASSIGNED = "assigned"
    IN_TRANSIT = "in-transit"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out-of-service"
    LOADING = "loading"
    UNLOADING = "unloading"


class VehicleType(Enum):
    TRUCK = "truck"
    VAN = "van"
    CAR = "car"
    MOTORCYCLE = "motorcycle"
    BICYCLE = "bicycle"


# Changes an operator may make directly; the rest belong to assignment and routes
_MANUAL_TRANSITIONS = {
    VehicleStatus.AVAILABLE: {VehicleStatus.MAINTENANCE, VehicleStatus.OUT_OF_SERVICE},
    VehicleStatus.MAINTENANCE: {VehicleStatus.AVAILABLE, VehicleStatus.OUT_OF_SERVICE},
    VehicleStatus.OUT_OF_SERVICE: {VehicleStatus.AVAILABLE, VehicleStatus.MAINTENANCE},
    VehicleStatus.ASSIGNED: {VehicleStatus.LOADING},
    VehicleStatus.LOADING: {VehicleStatus.ASSIGNED},
    VehicleStatus.IN_TRANSIT: {VehicleStatus.UNLOADING},
    VehicleStatus.UNLOADING: {VehicleStatus.IN_TRANSIT},
}

_DEPARTURE_STATUSES = {VehicleStatus.ASSIGNED, VehicleStatus.LOADING}


@dispatch.value_object(part_of="Vehicle")
class Capacity:
    weight = Float(required=True, min_value=0)  # kg
    volume = Float(min_value=0)  # m3


@dispatch.value_object(part_of="Vehicle")
class FleetMetrics:
    total_trips = Integer(default=0)
    total_distance = Float(default=0.0)
    total_fuel_consumed = Float(default=0.0)


@dispatch.aggregate
class Vehicle:
    registration_number = String(required=True, max_length=20, unique=True)
    vehicle_type = String(choices=VehicleType, default=VehicleType.VAN.value)
    capacity = ValueObject(Capacity)
    status = String(choices=VehicleStatus, default=VehicleStatus.AVAILABLE.value)
    assigned_driver_id = Identifier()
    current_order_id = Identifier()
    current_route_id = Identifier()
    metrics = ValueObject(FleetMetrics)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(
        cls,
        registration_number: str,
        capacity_weight: float,
        capacity_volume: float | None = None,
        vehicle_type: str = VehicleType.VAN.value,
    ):
        if capacity_weight is None or capacity_weight <= 0:
            raise ValidationError({"capacity_weight": ["Weight capacity must be greater than zero"]})
        now = datetime.now(UTC)
        vehicle = cls(
            registration_number=registration_number,
            vehicle_type=vehicle_type,
            capacity=Capacity(weight=capacity_weight, volume=capacity_volume),
            status=VehicleStatus.AVAILABLE.value,
            metrics=FleetMetrics(),
            created_at=now,
            updated_at=now,
        )
        vehicle.raise_(
            VehicleRegistered(
                vehicle_id=str(vehicle.id),
                registration_number=registration_number,
                vehicle_type=vehicle_type,
                capacity_weight=capacity_weight,
                capacity_volume=capacity_volume,
                registered_at=now,
            )
        )
        return vehicle

    @property
    def current_status(self) -> VehicleStatus:
        return VehicleStatus(self.status)

    def _move_to(self, target: VehicleStatus, reason: str) -> None:
        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            VehicleStatusChanged(
                vehicle_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                driver_id=self.assigned_driver_id,
                order_id=self.current_order_id,
                route_id=self.current_route_id,
                reason=reason,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Assignment
    # -------------------------------------------------------------------
    def assert_available(self) -> None:
        if self.current_status != VehicleStatus.AVAILABLE:
            raise VehicleUnavailable({"vehicle_id": [f"Vehicle {self.registration_number} is {self.status}"]})

    def fits(self, weight: float) -> bool:
        return weight <= self.capacity.weight

    def claim(self, driver_id: str, order_id: str, route_id: str | None = None) -> None:
        """Take the vehicle from ``available`` to ``assigned``."""
        self.assert_available()
        self.assigned_driver_id = driver_id
        self.current_order_id = order_id
        self.current_route_id = route_id
        self._move_to(VehicleStatus.ASSIGNED, f"Assigned to order {order_id}")

    def release(self, reason: str = "Released") -> None:
        """Back to ``available`` with no driver, order or route."""
        if self.current_status == VehicleStatus.AVAILABLE and not self.assigned_driver_id:
            return
        self.assigned_driver_id = None
        self.current_order_id = None
        self.current_route_id = None
        self._move_to(VehicleStatus.AVAILABLE, reason)

    def detach_order(self, order_id: str) -> None:
        """Forget ``order_id`` while the vehicle stays on the route it is driving."""
        if str(self.current_order_id or "") == str(order_id):
            self.current_order_id = None
            self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Route progress
    # -------------------------------------------------------------------
    def depart(self, route_id: str) -> None:
        if self.current_status not in _DEPARTURE_STATUSES:
            raise VehicleUnavailable({"vehicle_id": [f"Vehicle {self.registration_number} cannot depart while {self.status}"]})
        self.current_route_id = route_id
        self._move_to(VehicleStatus.IN_TRANSIT, f"Route {route_id} started")

    def finish_trip(self, route_id: str, distance: float, fuel_consumed: float) -> None:
        """Fold a completed route into the metrics.

        The vehicle is freed only if it is still running ``route_id``.
        """
        metrics = self.metrics or FleetMetrics()
        self.metrics = FleetMetrics(
            total_trips=(metrics.total_trips or 0) + 1,
            total_distance=(metrics.total_distance or 0.0) + distance,
            total_fuel_consumed=(metrics.total_fuel_consumed or 0.0) + fuel_consumed,
        )
        self.raise_(
            VehicleTripRecorded(
                vehicle_id=str(self.id),
                route_id=route_id,
                distance=distance,
                fuel_consumed=fuel_consumed,
                total_trips=self.metrics.total_trips,
                recorded_at=datetime.now(UTC),
            )
        )
        if str(self.current_route_id or "") == str(route_id):
            self.release(reason=f"Route {route_id} completed")

    # -------------------------------------------------------------------
    # Operator changes
    # -------------------------------------------------------------------
    def change_status(self, new_status: str, reason: str | None = None) -> None:
        try:
            target = VehicleStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown vehicle status {new_status!r}"]}) from None
        current = self.current_status
        if target not in _MANUAL_TRANSITIONS.get(current, set()):
            raise InvalidTransition({"status": [f"Cannot change vehicle from {current.value} to {target.value}"]})
        self._move_to(target, reason or f"Set to {target.value}")
