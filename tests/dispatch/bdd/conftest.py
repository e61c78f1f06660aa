"""Shared BDD fixtures and step definitions for the Dispatch domain."""

import pytest
from dispatch import operations
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from shared.errors import CapacityExceeded, Conflict, InvalidTransition, NotFound, Unavailable, VehicleUnavailable

# Map error names used in feature files to exception classes
_ERROR_CLASSES = {
    "ValidationError": ValidationError,
    "InvalidTransition": InvalidTransition,
    "CapacityExceeded": CapacityExceeded,
    "VehicleUnavailable": VehicleUnavailable,
    "NotFound": NotFound,
    "Conflict": Conflict,
    "Unavailable": Unavailable,
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured errors."""
    return {"exc": None}


@pytest.fixture()
def ctx():
    """Identifiers created along the scenario."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a driver "{driver}"'))
def a_driver(directory, driver, ctx):
    directory.add_user(driver, role="driver")
    ctx["driver_id"] = driver


@given(parsers.cfparse('a vehicle "{registration}" that carries {capacity:g} kg'))
def a_vehicle(new_vehicle, registration, capacity, ctx):
    ctx["vehicle_id"] = new_vehicle(registration=registration, capacity_weight=capacity)


@given(parsers.cfparse("a pending order of {weight:g} kg worth {amount:g}"))
def a_pending_order(new_order, weight, amount, ctx):
    ctx["order_id"] = new_order(weight=weight, total_amount=amount)


@given("a planned route")
def a_planned_route(planned_route, ctx):
    ctx["route_id"] = planned_route()


@given("the order is assigned to the driver and vehicle")
def order_is_assigned(ctx):
    operations.assign_order(ctx["order_id"], ctx["driver_id"], ctx["vehicle_id"], route_id=ctx.get("route_id"))


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(ctx, status):
    assert operations.get_order(ctx["order_id"]).status == status


@then(parsers.cfparse('the vehicle status is "{status}"'))
def vehicle_status_is(ctx, status):
    assert operations.get_vehicle(ctx["vehicle_id"]).status == status


@then(parsers.cfparse('the route status is "{status}"'))
def route_status_is(ctx, status):
    assert operations.get_route(ctx["route_id"]).status == status


@then("the vehicle is not held by any order")
def vehicle_is_free(ctx):
    vehicle = operations.get_vehicle(ctx["vehicle_id"])
    assert vehicle.current_order_id is None
    assert vehicle.assigned_driver_id is None


@then(parsers.cfparse("the action fails with {error_name}"))
def action_fails_with(error, error_name):
    assert error["exc"] is not None, f"Expected {error_name} but nothing was raised"
    assert isinstance(error["exc"], _ERROR_CLASSES[error_name]), f"Got {type(error['exc']).__name__}"
