"""Route planning — adding stops, optimizing their order, and sign-off."""

import json

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from dispatch.domain import dispatch
from dispatch.route.route import Route


@dispatch.command(part_of="Route")
class AddWaypoint:
    route_id = Identifier(required=True)
    waypoint = Text(required=True)  # JSON waypoint dict


@dispatch.command(part_of="Route")
class OptimizeRoute:
    route_id = Identifier(required=True)


@dispatch.command(part_of="Route")
class PlanRoute:
    """Sign off a draft route so it can be assigned."""

    route_id = Identifier(required=True)


@dispatch.command_handler(part_of=Route)
class RoutePlanningHandler:
    @handle(AddWaypoint)
    def add_waypoint(self, command):
        repo = current_domain.repository_for(Route)
        route = repo.get(command.route_id)
        data = json.loads(command.waypoint) if isinstance(command.waypoint, str) else command.waypoint
        waypoint = route.add_waypoint(data)
        repo.add(route)
        return {"waypoint_id": str(waypoint.id), "sequence": waypoint.sequence}

    @handle(OptimizeRoute)
    def optimize_route(self, command):
        repo = current_domain.repository_for(Route)
        route = repo.get(command.route_id)
        estimates = route.optimize()
        repo.add(route)
        return {
            **estimates,
            "waypoint_order": [str(w.id) for w in route.ordered_waypoints()],
        }

    @handle(PlanRoute)
    def plan_route(self, command):
        repo = current_domain.repository_for(Route)
        route = repo.get(command.route_id)
        route.plan()
        repo.add(route)
