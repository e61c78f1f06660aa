"""Outbound event handler — forwards route milestones to the event sink.

Location samples are not forwarded; they arrive too often to be useful as
notifications.
"""

from protean.utils.mixins import handle
from shared.sink.forwarding import forward

from dispatch.domain import dispatch
from dispatch.route.events import (
    RouteCompleted,
    RouteCreated,
    RouteOptimized,
    RouteStarted,
    RouteStatusChanged,
    WaypointStatusChanged,
)
from dispatch.route.route import Route


@dispatch.event_handler(part_of=Route)
class RouteEventForwarder:
    @handle(RouteCreated)
    def on_route_created(self, event: RouteCreated) -> None:
        forward(event, "Route", event.route_id)

    @handle(RouteStatusChanged)
    def on_status_changed(self, event: RouteStatusChanged) -> None:
        forward(event, "Route", event.route_id)

    @handle(RouteOptimized)
    def on_route_optimized(self, event: RouteOptimized) -> None:
        forward(event, "Route", event.route_id)

    @handle(RouteStarted)
    def on_route_started(self, event: RouteStarted) -> None:
        forward(event, "Route", event.route_id)

    @handle(WaypointStatusChanged)
    def on_waypoint_status_changed(self, event: WaypointStatusChanged) -> None:
        forward(event, "Route", event.route_id)

    @handle(RouteCompleted)
    def on_route_completed(self, event: RouteCompleted) -> None:
        forward(event, "Route", event.route_id)
