"""Assignment coordinator — binds an order to a driver, a vehicle and a route.

This is the one place that changes several aggregates in a single unit of
work. Every precondition is checked before the first mutation, so a failed
assignment leaves the order, the vehicle and the route untouched; the unit
of work then commits all three together or not at all.

Callers hold the serialization points of the order, the vehicle and the
route (see ``dispatch.operations``), which turns the vehicle's
``available → assigned`` step into a compare-and-swap: of two concurrent
assignments of the same vehicle only the first sees it available.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from shared.errors import CapacityExceeded, InvalidTransition, NotFound

from dispatch.directory import get_user_directory
from dispatch.directory.port import Role
from dispatch.domain import dispatch
from dispatch.order.order import Order
from dispatch.route.route import Route
from dispatch.vehicle.vehicle import Vehicle, VehicleStatus

logger = structlog.get_logger(__name__)


@dispatch.command(part_of="Order")
class AssignOrder:
    order_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    vehicle_id = Identifier(required=True)
    route_id = Identifier()


@dispatch.command(part_of="Order")
class ReleaseAssignment:
    order_id = Identifier(required=True)
    reason = String(max_length=500)


def _verify_driver(driver_id: str) -> None:
    user = get_user_directory().get_user(str(driver_id))
    if user is None:
        raise NotFound({"driver_id": [f"Driver {driver_id} does not exist"]})
    if user.get("role") != Role.DRIVER.value:
        raise ValidationError({"driver_id": [f"User {driver_id} is not a driver"]})


def _underway_route(vehicle: Vehicle) -> Route | None:
    """The route ``vehicle`` is currently driving, if it has departed."""
    if not vehicle.current_route_id:
        return None
    route = current_domain.repository_for(Route).get(vehicle.current_route_id)
    if vehicle.current_status == VehicleStatus.IN_TRANSIT or route.is_underway:
        return route
    return None


def release_order_vehicle(order: Order, reason: str = "Assignment released") -> bool:
    """Free the vehicle held for ``order``, if any.

    Returns False when nothing was bound or the vehicle has already moved on,
    which makes releasing twice harmless. A route still waiting for departure
    goes back to ``planned``. A vehicle already out on its route stays bound
    to it and only forgets the order; completing the route frees it.
    """
    if not order.vehicle_id:
        return False

    vehicle_repo = current_domain.repository_for(Vehicle)
    vehicle = vehicle_repo.get(order.vehicle_id)
    if str(vehicle.current_order_id or "") != str(order.id):
        return False

    if _underway_route(vehicle) is not None:
        vehicle.detach_order(str(order.id))
        vehicle_repo.add(vehicle)
        logger.info(
            "Order detached from running route",
            order_id=str(order.id),
            vehicle_id=str(vehicle.id),
            route_id=str(vehicle.current_route_id),
        )
        return False

    route_id = vehicle.current_route_id
    vehicle.release(reason=reason)
    vehicle_repo.add(vehicle)

    if route_id:
        route_repo = current_domain.repository_for(Route)
        route = route_repo.get(route_id)
        route.unassign(reason=reason)
        route_repo.add(route)

    logger.info("Vehicle released", order_id=str(order.id), vehicle_id=str(vehicle.id), reason=reason)
    return True


@dispatch.command_handler(part_of=Order)
class AssignmentHandler:
    @handle(AssignOrder)
    def assign_order(self, command):
        order_repo = current_domain.repository_for(Order)
        vehicle_repo = current_domain.repository_for(Vehicle)
        route_repo = current_domain.repository_for(Route)

        order = order_repo.get(command.order_id)
        order.assert_assignable()
        _verify_driver(command.driver_id)

        vehicle = vehicle_repo.get(command.vehicle_id)
        vehicle.assert_available()
        weight = order.cargo.total_weight if order.cargo else 0.0
        if not vehicle.fits(weight):
            raise CapacityExceeded(
                {"cargo": [f"Cargo weight {weight} kg exceeds vehicle capacity {vehicle.capacity.weight} kg"]}
            )

        route = None
        if command.route_id:
            route = route_repo.get(command.route_id)
            route.assert_assignable()

        order.assign(command.driver_id, command.vehicle_id, route_id=command.route_id)
        vehicle.claim(command.driver_id, str(order.id), route_id=command.route_id)
        order_repo.add(order)
        vehicle_repo.add(vehicle)
        if route is not None:
            route.assign(command.driver_id, command.vehicle_id, order_id=str(order.id))
            route_repo.add(route)

        logger.info(
            "Order assigned",
            order_id=str(order.id),
            driver_id=str(command.driver_id),
            vehicle_id=str(command.vehicle_id),
            route_id=str(command.route_id) if command.route_id else None,
        )
        return {
            "order_id": str(order.id),
            "status": order.status,
            "driver_id": str(command.driver_id),
            "vehicle_id": str(command.vehicle_id),
            "route_id": str(command.route_id) if command.route_id else None,
        }

    @handle(ReleaseAssignment)
    def release_assignment(self, command):
        order_repo = current_domain.repository_for(Order)
        order = order_repo.get(command.order_id)
        reason = command.reason or "Assignment released"
        if order.vehicle_id:
            vehicle = current_domain.repository_for(Vehicle).get(order.vehicle_id)
            if str(vehicle.current_order_id or "") == str(order.id) and _underway_route(vehicle) is not None:
                raise InvalidTransition(
                    {"order_id": [f"Order {order.order_number} is on a route in progress and cannot be released"]}
                )
        vehicle_released = release_order_vehicle(order, reason=reason)
        unbound = order.release_binding(reason)
        if unbound:
            order_repo.add(order)
        return {"order_id": str(order.id), "released": vehicle_released or unbound}
