"""Tests for ledger movements and their effect on current stock."""

import pytest
from inventory import config
from inventory.stock.events import StockMovementRecorded
from inventory.stock.stock import InventoryItem
from protean.exceptions import ValidationError
from shared.errors import InsufficientStock


@pytest.fixture()
def item():
    return InventoryItem.create(sku="BOLT-M8", name="M8 hex bolt", opening_quantity=100, reorder_point=10)


class TestMovementEffects:
    @pytest.mark.parametrize(
        "movement_type, quantity, expected",
        [
            ("in", 20, 120),
            ("out", 20, 80),
            ("damaged", 5, 95),
            ("expired", 5, 95),
            ("lost", 5, 95),
            ("transfer", 30, 100),
            ("adjustment", 7, 107),
            ("adjustment", -7, 93),
        ],
    )
    def test_effect_on_current(self, item, movement_type, quantity, expected):
        item.add_movement(movement_type, quantity)
        assert item.stock.current == expected
        assert item.stock.available == expected - item.stock.reserved

    def test_negative_adjustment_is_stored_as_magnitude(self, item):
        movement = item.add_movement("adjustment", -7, reason="Cycle count")
        assert movement.quantity == 7
        assert movement.effect == -7
        assert movement.balance_after == 93

    def test_transfer_is_ledger_only(self, item):
        movement = item.add_movement("transfer", 30, reference="WH-2")
        assert movement.effect == 0
        assert item.analytics.total_in == 100
        assert item.analytics.total_out == 0


class TestMovementValidation:
    def test_unknown_type(self, item):
        with pytest.raises(ValidationError):
            item.add_movement("borrowed", 1)

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity(self, item, quantity):
        with pytest.raises(ValidationError):
            item.add_movement("in", quantity)

    def test_zero_adjustment(self, item):
        with pytest.raises(ValidationError):
            item.add_movement("adjustment", 0)

    def test_cannot_remove_more_than_available(self, item):
        with pytest.raises(InsufficientStock):
            item.add_movement("out", 101)
        assert item.stock.current == 100
        assert len(item.movements) == 1

    def test_reserved_stock_cannot_be_removed(self, item):
        item.reserve(60)
        with pytest.raises(InsufficientStock):
            item.add_movement("damaged", 50)
        item.add_movement("damaged", 40)
        assert item.stock.available == 0


class TestLedger:
    def test_sequence_and_event(self, item):
        item.add_movement("out", 10, actor="picker-1", reference="SO-1")
        latest = item.recent_movements()[-1]
        assert latest.sequence == 2
        event = [e for e in item._events if isinstance(e, StockMovementRecorded)][-1]
        assert (event.previous_current, event.new_current) == (100, 90)
        assert event.reference == "SO-1"

    def test_analytics(self, item):
        item.add_movement("out", 10)
        item.add_movement("lost", 2)
        assert item.analytics.total_in == 100
        assert item.analytics.total_out == 12
        assert item.analytics.last_sold_at is not None

    def test_window_trims_oldest_but_keeps_count(self, item, monkeypatch):
        monkeypatch.setattr(config, "LEDGER_WINDOW", 3)
        for _ in range(4):
            item.add_movement("in", 1)
        assert [m.sequence for m in item.recent_movements()] == [3, 4, 5]
        assert item.movement_count == 5
        assert item.stock.current == 104
