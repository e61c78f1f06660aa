"""Route domain events — immutable facts about route planning and execution."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from dispatch.domain import dispatch


@dispatch.event(part_of="Route")
class RouteCreated:
    __version__ = "v1"

    route_id = Identifier(required=True)
    name = String(required=True)
    created_by = String()
    waypoint_count = Integer(required=True)
    planned_start = DateTime(required=True)
    planned_end = DateTime(required=True)
    created_at = DateTime(required=True)


@dispatch.event(part_of="Route")
class RouteStatusChanged:
    """Planning, assignment, pause, resume and cancellation moves."""

    __version__ = "v1"

    route_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    driver_id = Identifier()
    vehicle_id = Identifier()
    reason = String()
    changed_at = DateTime(required=True)


@dispatch.event(part_of="Route")
class WaypointAdded:
    __version__ = "v1"

    route_id = Identifier(required=True)
    waypoint_id = Identifier(required=True)
    sequence = Integer(required=True)
    waypoint_type = String(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)
    added_at = DateTime(required=True)


@dispatch.event(part_of="Route")
class WaypointStatusChanged:
    __version__ = "v1"

    route_id = Identifier(required=True)
    waypoint_id = Identifier(required=True)
    sequence = Integer(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@dispatch.event(part_of="Route")
class RouteOptimized:
    __version__ = "v1"

    route_id = Identifier(required=True)
    waypoint_order = Text(required=True)  # JSON list of waypoint ids
    total_distance = Float(required=True)
    estimated_duration = Float(required=True)
    estimated_fuel_cost = Float(required=True)
    optimized_at = DateTime(required=True)


@dispatch.event(part_of="Route")
class RouteStarted:
    __version__ = "v1"

    route_id = Identifier(required=True)
    driver_id = Identifier()
    vehicle_id = Identifier()
    started_at = DateTime(required=True)


@dispatch.event(part_of="Route")
class RouteLocationUpdated:
    __version__ = "v1"

    route_id = Identifier(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)
    address = String()
    travelled_distance = Float(required=True)
    recorded_at = DateTime(required=True)


@dispatch.event(part_of="Route")
class RouteCompleted:
    __version__ = "v1"

    route_id = Identifier(required=True)
    vehicle_id = Identifier()
    actual_distance = Float(required=True)
    actual_duration = Integer(required=True)
    delay_time = Integer(required=True)
    fuel_consumed = Float(required=True)
    issue_count = Integer(default=0)
    completed_at = DateTime(required=True)
