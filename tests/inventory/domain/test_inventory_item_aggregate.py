"""Tests for InventoryItem registration, derived status and lifecycle."""

import pytest
from inventory.stock.events import ItemRegistered, ItemStatusChanged, StockMovementRecorded
from inventory.stock.stock import InventoryItem, ItemStatus
from protean.exceptions import ValidationError
from shared.errors import InvalidTransition


def _item(**overrides):
    data = {"sku": "BOLT-M8", "name": "M8 hex bolt", "opening_quantity": 100, "reorder_point": 10}
    data.update(overrides)
    return InventoryItem.create(**data)


class TestRegistration:
    def test_opening_stock_is_a_movement(self):
        item = _item()
        assert item.stock.current == 100
        assert item.stock.available == 100
        assert item.stock.reserved == 0
        assert [m.movement_type for m in item.recent_movements()] == ["in"]
        assert item.recent_movements()[0].reason == "Opening balance"

    def test_events(self):
        item = _item()
        kinds = [type(e) for e in item._events]
        assert kinds[0] is ItemRegistered
        assert StockMovementRecorded in kinds

    def test_status_is_active_above_reorder_point(self):
        assert _item().status == ItemStatus.ACTIVE.value

    def test_registered_empty_is_out_of_stock(self):
        item = _item(opening_quantity=0)
        assert item.status == ItemStatus.OUT_OF_STOCK.value
        assert item.movements == []

    def test_registered_at_reorder_point_is_low_stock(self):
        assert _item(opening_quantity=10).status == ItemStatus.LOW_STOCK.value

    def test_negative_opening_quantity(self):
        with pytest.raises(ValidationError):
            _item(opening_quantity=-1)

    def test_maximum_below_reorder_point(self):
        with pytest.raises(ValidationError) as exc:
            _item(maximum=5, reorder_point=10)
        assert "maximum" in exc.value.messages

    def test_alert_settings_defaults(self):
        settings = _item().alert_settings
        assert settings.low_stock_enabled is True
        assert settings.low_stock_threshold is None


class TestDerivedStatus:
    def test_drops_to_low_stock(self):
        item = _item()
        item.add_movement("out", 90)
        assert item.status == ItemStatus.LOW_STOCK.value

    def test_drops_to_out_of_stock(self):
        item = _item()
        item.add_movement("out", 100)
        assert item.status == ItemStatus.OUT_OF_STOCK.value

    def test_restock_returns_to_active(self):
        item = _item(opening_quantity=0)
        item.add_movement("in", 50)
        assert item.status == ItemStatus.ACTIVE.value

    def test_status_change_event(self):
        item = _item()
        item._events.clear()
        item.add_movement("out", 95)
        changes = [e for e in item._events if isinstance(e, ItemStatusChanged)]
        assert [(c.previous_status, c.new_status) for c in changes] == [("active", "low-stock")]

    def test_unchanged_status_raises_no_event(self):
        item = _item()
        item._events.clear()
        item.add_movement("in", 5)
        assert not any(isinstance(e, ItemStatusChanged) for e in item._events)


class TestLifecycle:
    def test_deactivated_item_keeps_status_through_movements(self):
        item = _item()
        item.deactivate("Seasonal")
        item.add_movement("out", 95)
        assert item.status == ItemStatus.INACTIVE.value
        assert item.stock.available == 5

    def test_reactivate_recomputes_status(self):
        item = _item()
        item.deactivate()
        item.add_movement("out", 95)
        item.reactivate()
        assert item.status == ItemStatus.LOW_STOCK.value

    def test_reactivate_requires_inactive(self):
        with pytest.raises(InvalidTransition):
            _item().reactivate()

    def test_discontinue(self):
        item = _item()
        item.discontinue("Supplier stopped")
        assert item.status == ItemStatus.DISCONTINUED.value

    def test_discontinued_item_cannot_be_deactivated(self):
        item = _item()
        item.discontinue()
        with pytest.raises(InvalidTransition):
            item.deactivate()

    def test_discontinue_twice(self):
        item = _item()
        item.discontinue()
        with pytest.raises(InvalidTransition):
            item.discontinue()

    def test_cannot_discontinue_with_reservations(self):
        item = _item()
        item.reserve(5)
        with pytest.raises(ValidationError):
            item.discontinue()
