"""Route aggregate (CQRS) — a planned sequence of stops and its execution.

State Machine:
    DRAFT → PLANNED → ASSIGNED → IN_PROGRESS → COMPLETED
    ASSIGNED → PLANNED                      (assignment released)
    any non-terminal → PAUSED → (the state it was paused from)
    any non-terminal → CANCELLED

COMPLETED and CANCELLED are terminal.

Waypoints carry a 1-based contiguous ``sequence``. Each waypoint moves
PENDING → ARRIVED → COMPLETED, PENDING → COMPLETED or PENDING → SKIPPED.

The tracking path keeps the newest ``PATH_SAMPLE_LIMIT`` samples; the
distance travelled is accumulated as samples arrive so trimming never loses
it.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
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
from dispatch.route import optimization
from dispatch.route.events import (
    RouteCompleted,
    RouteCreated,
    RouteLocationUpdated,
    RouteOptimized,
    RouteStarted,
    RouteStatusChanged,
    WaypointAdded,
    WaypointStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class RouteStatus(Enum):
    DRAFT = "draft"
    PLANNED = "planned"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in-progress"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RoutePriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class WaypointType(Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"
    WAYPOINT = "waypoint"
    REST_STOP = "rest-stop"
    FUEL_STOP = "fuel-stop"


class WaypointStatus(Enum):
    PENDING = "pending"
    ARRIVED = "arrived"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class IssueSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


TERMINAL_STATUSES = {RouteStatus.COMPLETED, RouteStatus.CANCELLED}

_WAYPOINT_TRANSITIONS = {
    WaypointStatus.PENDING: {WaypointStatus.ARRIVED, WaypointStatus.COMPLETED, WaypointStatus.SKIPPED},
    WaypointStatus.ARRIVED: {WaypointStatus.COMPLETED},
    WaypointStatus.COMPLETED: set(),
    WaypointStatus.SKIPPED: set(),
}


def _as_utc(value: datetime | str | None) -> datetime | None:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _minutes(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@dispatch.value_object(part_of="Route")
class Scheduling:
    planned_start = DateTime(required=True)
    planned_end = DateTime(required=True)
    actual_start = DateTime()
    actual_end = DateTime()


@dispatch.value_object(part_of="Route")
class OptimizationSummary:
    """Estimates from the last optimization pass."""

    total_distance = Float(default=0.0)  # km
    estimated_duration = Float(default=0.0)  # minutes
    estimated_fuel_cost = Float(default=0.0)
    optimized_at = DateTime()


@dispatch.value_object(part_of="Route")
class CurrentLocation:
    latitude = Float()
    longitude = Float()
    address = String(max_length=500)
    recorded_at = DateTime()


@dispatch.value_object(part_of="Route")
class RouteMetrics:
    """Actuals, filled in when the route completes."""

    actual_distance = Float(default=0.0)
    actual_duration = Integer(default=0)  # minutes
    delay_time = Integer(default=0)  # minutes
    fuel_consumed = Float(default=0.0)  # litres


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@dispatch.entity(part_of="Route")
class Waypoint:
    sequence = Integer(required=True, min_value=1)
    name = String(max_length=200)
    address = String(max_length=500)
    latitude = Float(required=True, min_value=-90, max_value=90)
    longitude = Float(required=True, min_value=-180, max_value=180)
    waypoint_type = String(choices=WaypointType, default=WaypointType.WAYPOINT.value)
    status = String(choices=WaypointStatus, default=WaypointStatus.PENDING.value)
    order_id = Identifier()
    contact_name = String(max_length=100)
    contact_phone = String(max_length=30)
    estimated_arrival = DateTime()
    estimated_departure = DateTime()
    actual_arrival = DateTime()
    actual_departure = DateTime()
    notes = String(max_length=1000)


@dispatch.entity(part_of="Route")
class PathSample:
    sequence = Integer(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)
    address = String(max_length=500)
    recorded_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@dispatch.aggregate
class Route:
    name = String(required=True, max_length=200)
    description = String(max_length=1000)
    created_by = String(max_length=100)
    driver_id = Identifier()
    vehicle_id = Identifier()
    status = String(choices=RouteStatus, default=RouteStatus.DRAFT.value)
    paused_from = String(choices=RouteStatus)
    priority = String(choices=RoutePriority, default=RoutePriority.MEDIUM.value)
    order_ids = Text()  # JSON list of bound order ids
    waypoints = HasMany(Waypoint)
    scheduling = ValueObject(Scheduling)
    optimization = ValueObject(OptimizationSummary)
    current_location = ValueObject(CurrentLocation)
    path = HasMany(PathSample)
    path_count = Integer(default=0)
    travelled_distance = Float(default=0.0)
    metrics = ValueObject(RouteMetrics)
    completion_notes = Text()
    issues = Text()  # JSON list of {type, description, severity}
    completed_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name: str,
        planned_start: datetime,
        planned_end: datetime,
        waypoints: list[dict] | None = None,
        created_by: str | None = None,
        **details,
    ):
        start, end = _as_utc(planned_start), _as_utc(planned_end)
        if start is None or end is None:
            raise ValidationError({"scheduling": ["Planned start and end are required"]})
        if start >= end:
            raise ValidationError({"scheduling": ["Planned start must be before planned end"]})

        waypoints = [dict(w) for w in waypoints or []]
        for position, data in enumerate(waypoints, start=1):
            data.setdefault("sequence", position)
        _validate_waypoints(waypoints)

        now = datetime.now(UTC)
        route = cls(
            name=name,
            created_by=created_by,
            status=RouteStatus.DRAFT.value,
            scheduling=Scheduling(planned_start=start, planned_end=end),
            order_ids=json.dumps([]),
            created_at=now,
            updated_at=now,
            **details,
        )
        for data in sorted(waypoints, key=lambda w: w["sequence"]):
            route.add_waypoints(Waypoint(**{k: v for k, v in data.items() if k != "status"}))
        route.raise_(
            RouteCreated(
                route_id=str(route.id),
                name=name,
                created_by=created_by,
                waypoint_count=len(waypoints),
                planned_start=start,
                planned_end=end,
                created_at=now,
            )
        )
        return route

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> RouteStatus:
        return RouteStatus(self.status)

    def ordered_waypoints(self) -> list:
        return sorted(self.waypoints or [], key=lambda w: w.sequence)

    def linked_orders(self) -> list[str]:
        return json.loads(self.order_ids) if self.order_ids else []

    def progress(self) -> int:
        """Percentage of waypoints completed, rounded."""
        if not self.waypoints:
            return 0
        done = sum(1 for w in self.waypoints if w.status == WaypointStatus.COMPLETED.value)
        return round(done / len(self.waypoints) * 100)

    def _move_to(self, target: RouteStatus, reason: str | None = None, now: datetime | None = None) -> None:
        previous = self.status
        now = now or datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            RouteStatusChanged(
                route_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                driver_id=self.driver_id,
                vehicle_id=self.vehicle_id,
                reason=reason,
                changed_at=now,
            )
        )

    def _require(self, expected: RouteStatus, action: str) -> None:
        if self.current_status != expected:
            raise InvalidTransition(
                {"status": [f"Cannot {action} a route in {self.status} status, it must be {expected.value}"]}
            )

    @property
    def is_underway(self) -> bool:
        """In progress, or paused while in progress."""
        current = self.current_status
        return current == RouteStatus.IN_PROGRESS or (
            current == RouteStatus.PAUSED and self.paused_from == RouteStatus.IN_PROGRESS.value
        )

    def _assert_editable(self, action: str) -> None:
        """Stops may change until the route is under way or finished."""
        if self.is_underway or self.current_status in TERMINAL_STATUSES:
            raise InvalidTransition({"status": [f"Cannot {action} while the route is {self.status}"]})

    # -------------------------------------------------------------------
    # Planning
    # -------------------------------------------------------------------
    def plan(self) -> None:
        self._require(RouteStatus.DRAFT, "plan")
        if not self.waypoints:
            raise ValidationError({"waypoints": ["A route needs at least one waypoint to be planned"]})
        self._move_to(RouteStatus.PLANNED, "Planned")

    def assert_assignable(self) -> None:
        self._require(RouteStatus.PLANNED, "assign")

    def assign(self, driver_id: str, vehicle_id: str, order_id: str | None = None) -> None:
        self.assert_assignable()
        self.driver_id = driver_id
        self.vehicle_id = vehicle_id
        if order_id:
            linked = self.linked_orders()
            if str(order_id) not in linked:
                linked.append(str(order_id))
            self.order_ids = json.dumps(linked)
        self._move_to(RouteStatus.ASSIGNED, f"Assigned to driver {driver_id}")

    def unassign(self, reason: str = "Assignment released") -> None:
        """Back to ``planned`` when the vehicle is released before departure."""
        if self.current_status != RouteStatus.ASSIGNED:
            return
        self.driver_id = None
        self.vehicle_id = None
        self._move_to(RouteStatus.PLANNED, reason)

    def add_waypoint(self, data: dict):
        self._assert_editable("add waypoints")
        data = {k: v for k, v in data.items() if k not in ("sequence", "status")}
        data["sequence"] = len(self.waypoints or []) + 1
        _validate_coordinates(data, "waypoint")
        waypoint = Waypoint(**data)
        self.add_waypoints(waypoint)
        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            WaypointAdded(
                route_id=str(self.id),
                waypoint_id=str(waypoint.id),
                sequence=waypoint.sequence,
                waypoint_type=waypoint.waypoint_type,
                latitude=waypoint.latitude,
                longitude=waypoint.longitude,
                added_at=now,
            )
        )
        return waypoint

    def optimize(self) -> dict:
        """Reorder stops and refresh the distance, duration and cost estimates.

        Applying it again to the result changes nothing.
        """
        if self.current_status in TERMINAL_STATUSES:
            raise InvalidTransition({"status": [f"Cannot optimize a {self.status} route"]})

        ordered = optimization.order_waypoints(self.ordered_waypoints())
        for position, waypoint in enumerate(ordered, start=1):
            waypoint.sequence = position
        distance = optimization.path_distance([(w.latitude, w.longitude) for w in ordered])
        estimates = optimization.estimate(distance)

        now = datetime.now(UTC)
        self.optimization = OptimizationSummary(optimized_at=now, **estimates)
        self.updated_at = now
        self.raise_(
            RouteOptimized(
                route_id=str(self.id),
                waypoint_order=json.dumps([str(w.id) for w in ordered]),
                optimized_at=now,
                **estimates,
            )
        )
        return estimates

    # -------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------
    def start(self, now: datetime | None = None) -> None:
        self._require(RouteStatus.ASSIGNED, "start")
        now = now or datetime.now(UTC)
        self.scheduling = Scheduling(
            planned_start=self.scheduling.planned_start,
            planned_end=self.scheduling.planned_end,
            actual_start=now,
        )
        self._move_to(RouteStatus.IN_PROGRESS, "Started", now=now)
        self.raise_(
            RouteStarted(
                route_id=str(self.id),
                driver_id=self.driver_id,
                vehicle_id=self.vehicle_id,
                started_at=now,
            )
        )

    def update_waypoint_status(self, waypoint_id: str, status: str, now: datetime | None = None) -> None:
        if self.current_status in TERMINAL_STATUSES:
            raise InvalidTransition({"status": [f"Cannot update stops on a {self.status} route"]})
        try:
            target = WaypointStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown waypoint status {status!r}"]}) from None

        waypoint = next((w for w in self.waypoints or [] if str(w.id) == str(waypoint_id)), None)
        if waypoint is None:
            raise ValidationError({"waypoint_id": ["Waypoint not found on this route"]})

        current = WaypointStatus(waypoint.status)
        if target not in _WAYPOINT_TRANSITIONS[current]:
            raise InvalidTransition(
                {"status": [f"Cannot move waypoint {waypoint.sequence} from {current.value} to {target.value}"]}
            )

        now = now or datetime.now(UTC)
        waypoint.status = target.value
        if target == WaypointStatus.ARRIVED:
            waypoint.actual_arrival = now
        elif target == WaypointStatus.COMPLETED:
            waypoint.actual_departure = now
        self.updated_at = now
        self.raise_(
            WaypointStatusChanged(
                route_id=str(self.id),
                waypoint_id=str(waypoint.id),
                sequence=waypoint.sequence,
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    def update_location(self, latitude: float, longitude: float, address: str | None = None) -> None:
        _validate_coordinates({"latitude": latitude, "longitude": longitude}, "location")
        if self.current_status in TERMINAL_STATUSES:
            raise InvalidTransition({"status": [f"Cannot track a {self.status} route"]})

        now = datetime.now(UTC)
        previous = self.current_location
        if previous and previous.latitude is not None and previous.longitude is not None:
            leg = optimization.haversine_km(previous.latitude, previous.longitude, latitude, longitude)
            self.travelled_distance = (self.travelled_distance or 0.0) + leg

        self.current_location = CurrentLocation(latitude=latitude, longitude=longitude, address=address, recorded_at=now)
        self.path_count = (self.path_count or 0) + 1
        self.add_path(
            PathSample(
                sequence=self.path_count,
                latitude=latitude,
                longitude=longitude,
                address=address,
                recorded_at=now,
            )
        )
        overflow = len(self.path) - config.PATH_SAMPLE_LIMIT
        if overflow > 0:
            for old in sorted(self.path, key=lambda s: s.sequence)[:overflow]:
                self.remove_path(old)

        self.updated_at = now
        self.raise_(
            RouteLocationUpdated(
                route_id=str(self.id),
                latitude=latitude,
                longitude=longitude,
                address=address,
                travelled_distance=self.travelled_distance,
                recorded_at=now,
            )
        )

    def complete(self, notes: str | None = None, issues: list[dict] | None = None, now: datetime | None = None) -> RouteMetrics:
        """Finish the route and compute actual distance, duration and delay."""
        self._require(RouteStatus.IN_PROGRESS, "complete")
        issues = issues or []
        for issue in issues:
            if not issue.get("description"):
                raise ValidationError({"issues": ["Every issue needs a description"]})
            if issue.get("severity") not in (None, *(s.value for s in IssueSeverity)):
                raise ValidationError({"issues": [f"Unknown issue severity {issue['severity']!r}"]})

        now = now or datetime.now(UTC)
        actual_start = _as_utc(self.scheduling.actual_start)
        planned_start = _as_utc(self.scheduling.planned_start)
        planned_end = _as_utc(self.scheduling.planned_end)

        duration = _minutes(actual_start, now)
        planned = _minutes(planned_start, planned_end)
        distance = self.travelled_distance or (self.optimization.total_distance if self.optimization else 0.0)
        if not distance:
            distance = optimization.path_distance([(w.latitude, w.longitude) for w in self.ordered_waypoints()])

        self.metrics = RouteMetrics(
            actual_distance=distance,
            actual_duration=duration,
            delay_time=max(0, duration - planned),
            fuel_consumed=optimization.fuel_for(distance),
        )
        self.scheduling = Scheduling(
            planned_start=planned_start,
            planned_end=planned_end,
            actual_start=actual_start,
            actual_end=now,
        )
        self.completion_notes = notes
        self.issues = json.dumps(issues)
        self.completed_at = now
        self._move_to(RouteStatus.COMPLETED, "Completed", now=now)
        self.raise_(
            RouteCompleted(
                route_id=str(self.id),
                vehicle_id=self.vehicle_id,
                actual_distance=self.metrics.actual_distance,
                actual_duration=self.metrics.actual_duration,
                delay_time=self.metrics.delay_time,
                fuel_consumed=self.metrics.fuel_consumed,
                issue_count=len(issues),
                completed_at=now,
            )
        )
        return self.metrics

    # -------------------------------------------------------------------
    # Interruptions
    # -------------------------------------------------------------------
    def pause(self, reason: str | None = None) -> None:
        current = self.current_status
        if current in TERMINAL_STATUSES or current == RouteStatus.PAUSED:
            raise InvalidTransition({"status": [f"Cannot pause a route in {current.value} status"]})
        self.paused_from = current.value
        self._move_to(RouteStatus.PAUSED, reason or "Paused")

    def resume(self) -> None:
        self._require(RouteStatus.PAUSED, "resume")
        target = RouteStatus(self.paused_from)
        self.paused_from = None
        self._move_to(target, "Resumed")

    def cancel(self, reason: str) -> None:
        current = self.current_status
        if current in TERMINAL_STATUSES:
            raise InvalidTransition({"status": [f"Cannot cancel a route in {current.value} status"]})
        self.paused_from = None
        self._move_to(RouteStatus.CANCELLED, reason)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------
def _validate_coordinates(data: dict, field: str) -> None:
    lat, lng = data.get("latitude"), data.get("longitude")
    if lat is None or lng is None:
        raise ValidationError({field: ["Latitude and longitude are required"]})
    if not -90 <= lat <= 90 or not -180 <= lng <= 180:
        raise ValidationError({field: [f"Coordinates ({lat}, {lng}) are out of range"]})


def _validate_waypoints(waypoints: list[dict]) -> None:
    sequences = sorted(w["sequence"] for w in waypoints)
    if sequences != list(range(1, len(waypoints) + 1)):
        raise ValidationError({"waypoints": ["Waypoint sequence must run 1..n without gaps or repeats"]})
    for data in waypoints:
        _validate_coordinates(data, "waypoints")
