"""BDD tests for route planning, execution and interruption."""

from dispatch import operations
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/route_lifecycle.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the order is assigned to the driver and vehicle")
def assign_with_route(ctx):
    operations.assign_order(ctx["order_id"], ctx["driver_id"], ctx["vehicle_id"], route_id=ctx["route_id"])


@given("the route is started")
@when("the route is started")
def start(ctx, error):
    try:
        operations.start_route(ctx["route_id"])
    except ValidationError as exc:
        error["exc"] = exc


@when("the route is completed")
def complete(ctx):
    ctx["metrics"] = operations.complete_route(ctx["route_id"], notes="Delivered on time")


@when("the assignment is released")
def release(ctx):
    operations.release_assignment(ctx["order_id"], reason="Driver unavailable")


@when("the route is paused and resumed")
def pause_and_resume(ctx):
    operations.pause_route(ctx["route_id"], reason="Fuel stop")
    operations.resume_route(ctx["route_id"])


@when("the route is cancelled")
def cancel(ctx):
    operations.cancel_route(ctx["route_id"], reason="Road closed")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the route is linked to the order")
def linked(ctx):
    assert operations.get_route(ctx["route_id"]).linked_orders() == [ctx["order_id"]]


@then(parsers.cfparse("the vehicle has {count:d} recorded trip"))
def recorded_trips(ctx, count):
    assert operations.get_vehicle(ctx["vehicle_id"]).metrics.total_trips == count
