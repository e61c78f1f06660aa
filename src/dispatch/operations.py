"""Dispatch contract surface — serialized entry points for callers.

Every mutating operation holds the serialization points of all aggregates it
may change for the whole ``current_domain.process`` call. Bindings that are
only known after reading an aggregate (the vehicle an order holds, the
vehicle a route runs on) are locked after the owning aggregate, which keeps
the acquisition order Order, Route, Vehicle everywhere.

Must be called inside a dispatch domain context.
"""

import json
from contextlib import contextmanager
from datetime import date, datetime

from protean.utils.globals import current_domain
from shared.locking import serialized

from dispatch.assignment.coordinator import AssignOrder, ReleaseAssignment
from dispatch.order.cancellation import CancelOrder
from dispatch.order.creation import CreateOrder
from dispatch.order.notes import AddOrderNote
from dispatch.order.order import Order
from dispatch.order.status import UpdateOrderStatus
from dispatch.order.tracking import track_order
from dispatch.route.creation import CreateRoute
from dispatch.route.execution import CompleteRoute, StartRoute, UpdateRouteLocation, UpdateWaypointStatus
from dispatch.route.interruptions import CancelRoute, PauseRoute, ResumeRoute
from dispatch.route.planning import AddWaypoint, OptimizeRoute, PlanRoute
from dispatch.route.route import Route
from dispatch.vehicle.registration import ChangeVehicleStatus, RegisterVehicle
from dispatch.vehicle.vehicle import Vehicle

__all__ = [
    "add_note",
    "add_waypoint",
    "assign_order",
    "cancel_order",
    "cancel_route",
    "change_vehicle_status",
    "complete_route",
    "create_order",
    "create_route",
    "get_order",
    "get_route",
    "get_vehicle",
    "optimize_route",
    "pause_route",
    "plan_route",
    "register_vehicle",
    "release_assignment",
    "resume_route",
    "start_route",
    "track_order",
    "update_order_status",
    "update_route_location",
    "update_waypoint_status",
]


def _json(value) -> str | None:
    if value is None:
        return None
    return json.dumps(value, default=lambda v: v.isoformat() if isinstance(v, (date, datetime)) else str(v))


def _process(command):
    return current_domain.process(command, asynchronous=False)


def get_order(order_id) -> Order:
    return current_domain.repository_for(Order).get(order_id)


def get_route(route_id) -> Route:
    return current_domain.repository_for(Route).get(route_id)


def get_vehicle(vehicle_id) -> Vehicle:
    return current_domain.repository_for(Vehicle).get(vehicle_id)


@contextmanager
def _order_scope(order_id):
    """Hold the order, then the route and vehicle it is bound to."""
    with serialized(("Order", order_id)):
        order = get_order(order_id)
        with serialized(("Route", order.route_id), ("Vehicle", order.vehicle_id)):
            yield


@contextmanager
def _route_scope(route_id):
    """Hold the route, then the vehicle it runs on."""
    with serialized(("Route", route_id)):
        route = get_route(route_id)
        with serialized(("Vehicle", route.vehicle_id)):
            yield


# ---------------------------------------------------------------------------
# Vehicles
# ---------------------------------------------------------------------------
def register_vehicle(
    registration_number: str,
    capacity_weight: float,
    capacity_volume: float | None = None,
    vehicle_type: str = "van",
) -> str:
    command = RegisterVehicle(
        registration_number=registration_number,
        capacity_weight=capacity_weight,
        capacity_volume=capacity_volume,
        vehicle_type=vehicle_type,
    )
    with serialized(("Vehicle", f"reg:{command.registration_number.strip().upper()}")):
        return _process(command)


def change_vehicle_status(vehicle_id, status: str, reason: str | None = None) -> None:
    with serialized(("Vehicle", vehicle_id)):
        _process(ChangeVehicleStatus(vehicle_id=vehicle_id, status=status, reason=reason))


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
def create_order(order_data: dict) -> str:
    """Create an order from a plain dict; returns the new order id.

    ``pickup`` and ``delivery`` are stop dicts, ``cargo`` a list of line dicts
    and ``pricing`` an optional dict.
    """
    data = dict(order_data)
    for key in ("pickup", "delivery", "cargo", "pricing"):
        data[key] = _json(data.get(key))
    return _process(CreateOrder(**{k: v for k, v in data.items() if v is not None}))


def update_order_status(
    order_id,
    new_status: str,
    actor: str | None = None,
    notes: str | None = None,
    location: dict | None = None,
) -> str:
    location = location or {}
    command = UpdateOrderStatus(
        order_id=order_id,
        status=new_status,
        actor=actor,
        notes=notes,
        latitude=location.get("latitude"),
        longitude=location.get("longitude"),
        address=location.get("address"),
    )
    with serialized(("Order", order_id)):
        return _process(command)


def cancel_order(order_id, reason: str, actor: str | None = None) -> dict:
    with _order_scope(order_id):
        return _process(CancelOrder(order_id=order_id, reason=reason, actor=actor))


def add_note(order_id, text: str, author: str | None = None, private: bool = False) -> None:
    with serialized(("Order", order_id)):
        _process(AddOrderNote(order_id=order_id, text=text, author=author, private=private))


# ---------------------------------------------------------------------------
# Assignment
# ---------------------------------------------------------------------------
def assign_order(order_id, driver_id, vehicle_id, route_id=None) -> dict:
    command = AssignOrder(order_id=order_id, driver_id=driver_id, vehicle_id=vehicle_id, route_id=route_id)
    with serialized(("Order", order_id), ("Route", route_id), ("Vehicle", vehicle_id)):
        return _process(command)


def release_assignment(order_id, reason: str | None = None) -> dict:
    with _order_scope(order_id):
        return _process(ReleaseAssignment(order_id=order_id, reason=reason))


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
def create_route(route_data: dict) -> str:
    data = dict(route_data)
    data["waypoints"] = _json(data.get("waypoints"))
    return _process(CreateRoute(**{k: v for k, v in data.items() if v is not None}))


def add_waypoint(route_id, waypoint_data: dict) -> dict:
    with serialized(("Route", route_id)):
        return _process(AddWaypoint(route_id=route_id, waypoint=_json(waypoint_data)))


def update_waypoint_status(route_id, waypoint_id, status: str) -> dict:
    with serialized(("Route", route_id)):
        return _process(UpdateWaypointStatus(route_id=route_id, waypoint_id=waypoint_id, status=status))


def plan_route(route_id) -> None:
    with serialized(("Route", route_id)):
        _process(PlanRoute(route_id=route_id))


def optimize_route(route_id) -> dict:
    with serialized(("Route", route_id)):
        return _process(OptimizeRoute(route_id=route_id))


def start_route(route_id) -> None:
    with _route_scope(route_id):
        _process(StartRoute(route_id=route_id))


def complete_route(route_id, notes: str | None = None, issues: list[dict] | None = None) -> dict:
    with _route_scope(route_id):
        return _process(CompleteRoute(route_id=route_id, notes=notes, issues=_json(issues or [])))


def update_route_location(route_id, latitude: float, longitude: float, address: str | None = None) -> None:
    command = UpdateRouteLocation(route_id=route_id, latitude=latitude, longitude=longitude, address=address)
    with serialized(("Route", route_id)):
        _process(command)


def pause_route(route_id, reason: str | None = None) -> None:
    with serialized(("Route", route_id)):
        _process(PauseRoute(route_id=route_id, reason=reason))


def resume_route(route_id) -> str:
    with serialized(("Route", route_id)):
        return _process(ResumeRoute(route_id=route_id))


def cancel_route(route_id, reason: str) -> None:
    linked = [("Order", order_id) for order_id in get_route(route_id).linked_orders()]
    with serialized(*linked), _route_scope(route_id):
        _process(CancelRoute(route_id=route_id, reason=reason))
