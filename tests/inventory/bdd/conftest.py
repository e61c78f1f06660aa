"""Shared BDD fixtures and step definitions for the Inventory domain."""

import pytest
from inventory import operations
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from shared.errors import InsufficientStock, InvalidTransition

_ERROR_CLASSES = {
    "ValidationError": ValidationError,
    "InsufficientStock": InsufficientStock,
    "InvalidTransition": InvalidTransition,
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
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('an item "{sku}" with {quantity:d} units and a reorder point of {reorder_point:d}'),
    target_fixture="item_id",
)
def an_item(register, sku, quantity, reorder_point):
    return register(sku=sku, opening_quantity=quantity, reorder_point=reorder_point)


@given(parsers.cfparse("{quantity:d} units are reserved"))
def units_reserved(item_id, quantity):
    operations.reserve_stock(item_id, quantity)


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse("current stock is {current:d}, reserved {reserved:d} and available {available:d}"))
def stock_levels(item_id, current, reserved, available):
    stock = operations.get_item(item_id).stock
    assert (stock.current, stock.reserved, stock.available) == (current, reserved, available)


@then(parsers.cfparse('the item status is "{status}"'))
def item_status(item_id, status):
    assert operations.get_item(item_id).status == status


@then(parsers.cfparse("the action fails with {error_name}"))
def action_fails_with(error, error_name):
    assert error["exc"] is not None, f"Expected {error_name} but nothing was raised"
    assert isinstance(error["exc"], _ERROR_CLASSES[error_name])
