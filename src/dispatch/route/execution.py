"""Route execution — departure, stop progress, tracking and completion.

Starting and completing a route also moves the vehicle it runs on, in the
same unit of work.
"""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from dispatch.domain import dispatch
from dispatch.route.route import Route
from dispatch.vehicle.vehicle import Vehicle

logger = structlog.get_logger(__name__)


@dispatch.command(part_of="Route")
class StartRoute:
    route_id = Identifier(required=True)


@dispatch.command(part_of="Route")
class UpdateWaypointStatus:
    route_id = Identifier(required=True)
    waypoint_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@dispatch.command(part_of="Route")
class UpdateRouteLocation:
    route_id = Identifier(required=True)
    latitude = Float(required=True)
    longitude = Float(required=True)
    address = String(max_length=500)


@dispatch.command(part_of="Route")
class CompleteRoute:
    route_id = Identifier(required=True)
    notes = Text()
    issues = Text()  # JSON list of {type, description, severity}


@dispatch.command_handler(part_of=Route)
class RouteExecutionHandler:
    @handle(StartRoute)
    def start_route(self, command):
        route_repo = current_domain.repository_for(Route)
        vehicle_repo = current_domain.repository_for(Vehicle)
        route = route_repo.get(command.route_id)
        route.start()
        if route.vehicle_id:
            vehicle = vehicle_repo.get(route.vehicle_id)
            vehicle.depart(str(route.id))
            vehicle_repo.add(vehicle)
        route_repo.add(route)
        logger.info("Route started", route_id=str(route.id), vehicle_id=route.vehicle_id)

    @handle(UpdateWaypointStatus)
    def update_waypoint_status(self, command):
        repo = current_domain.repository_for(Route)
        route = repo.get(command.route_id)
        route.update_waypoint_status(command.waypoint_id, command.status)
        repo.add(route)
        return {"progress": route.progress()}

    @handle(UpdateRouteLocation)
    def update_location(self, command):
        repo = current_domain.repository_for(Route)
        route = repo.get(command.route_id)
        route.update_location(command.latitude, command.longitude, command.address)
        repo.add(route)

    @handle(CompleteRoute)
    def complete_route(self, command):
        route_repo = current_domain.repository_for(Route)
        vehicle_repo = current_domain.repository_for(Vehicle)
        route = route_repo.get(command.route_id)
        issues = json.loads(command.issues) if isinstance(command.issues, str) else command.issues
        metrics = route.complete(notes=command.notes, issues=issues)
        if route.vehicle_id:
            vehicle = vehicle_repo.get(route.vehicle_id)
            vehicle.finish_trip(str(route.id), metrics.actual_distance, metrics.fuel_consumed)
            vehicle_repo.add(vehicle)
        route_repo.add(route)
        logger.info(
            "Route completed",
            route_id=str(route.id),
            actual_duration=metrics.actual_duration,
            delay_time=metrics.delay_time,
        )
        return {
            "actual_distance": metrics.actual_distance,
            "actual_duration": metrics.actual_duration,
            "delay_time": metrics.delay_time,
            "fuel_consumed": metrics.fuel_consumed,
        }
