"""Pausing, resuming and cancelling routes."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from dispatch.domain import dispatch
from dispatch.order.order import Order
from dispatch.route.route import Route
from dispatch.vehicle.vehicle import Vehicle


@dispatch.command(part_of="Route")
class PauseRoute:
    route_id = Identifier(required=True)
    reason = String(max_length=500)


@dispatch.command(part_of="Route")
class ResumeRoute:
    route_id = Identifier(required=True)


@dispatch.command(part_of="Route")
class CancelRoute:
    route_id = Identifier(required=True)
    reason = String(required=True, max_length=500)


@dispatch.command_handler(part_of=Route)
class RouteInterruptionHandler:
    @handle(PauseRoute)
    def pause_route(self, command):
        repo = current_domain.repository_for(Route)
        route = repo.get(command.route_id)
        route.pause(command.reason)
        repo.add(route)

    @handle(ResumeRoute)
    def resume_route(self, command):
        repo = current_domain.repository_for(Route)
        route = repo.get(command.route_id)
        route.resume()
        repo.add(route)
        return route.status

    @handle(CancelRoute)
    def cancel_route(self, command):
        route_repo = current_domain.repository_for(Route)
        route = route_repo.get(command.route_id)
        route.cancel(command.reason)
        reason = f"Route {route.id} cancelled"
        if route.vehicle_id:
            vehicle_repo = current_domain.repository_for(Vehicle)
            vehicle = vehicle_repo.get(route.vehicle_id)
            if str(vehicle.current_route_id or "") == str(route.id):
                vehicle.release(reason=reason)
                vehicle_repo.add(vehicle)
        order_repo = current_domain.repository_for(Order)
        for order_id in route.linked_orders():
            order = order_repo.get(order_id)
            if str(order.route_id or "") == str(route.id) and order.release_binding(reason):
                order_repo.add(order)
        route_repo.add(route)
