"""Route creation — command and handler."""

import json

from protean import handle
from protean.fields import DateTime, String, Text
from protean.utils.globals import current_domain

from dispatch.domain import dispatch
from dispatch.route.route import Route, RoutePriority


@dispatch.command(part_of="Route")
class CreateRoute:
    name = String(required=True, max_length=200)
    description = String(max_length=1000)
    created_by = String(max_length=100)
    priority = String(choices=RoutePriority, default=RoutePriority.MEDIUM.value)
    planned_start = DateTime(required=True)
    planned_end = DateTime(required=True)
    waypoints = Text()  # JSON list of waypoint dicts


@dispatch.command_handler(part_of=Route)
class CreateRouteHandler:
    @handle(CreateRoute)
    def create_route(self, command):
        waypoints = json.loads(command.waypoints) if isinstance(command.waypoints, str) else command.waypoints
        details = {key: getattr(command, key) for key in ("description", "priority") if getattr(command, key) is not None}
        route = Route.create(
            name=command.name,
            planned_start=command.planned_start,
            planned_end=command.planned_end,
            waypoints=waypoints,
            created_by=command.created_by,
            **details,
        )
        current_domain.repository_for(Route).add(route)
        return str(route.id)
