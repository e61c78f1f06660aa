"""Tests for the stock balance invariant on InventoryItem."""

import pytest
from inventory.stock.stock import InventoryItem, StockLevels
from protean.exceptions import ValidationError


@pytest.fixture()
def item():
    return InventoryItem.create(sku="BOLT-M8", name="M8 hex bolt", opening_quantity=20)


class TestStockBalance:
    def test_available_always_matches(self, item):
        item.reserve(5)
        item.add_movement("out", 10)
        item.release_reserved(2)
        assert item.stock.available == item.stock.current - item.stock.reserved == 7

    def test_unbalanced_levels_are_rejected(self, item):
        with pytest.raises(ValidationError):
            item.stock = StockLevels(current=10, reserved=0, available=9, reorder_point=10)

    def test_negative_current_is_rejected(self, item):
        with pytest.raises(ValidationError):
            item.stock = StockLevels(current=-1, reserved=0, available=-1, reorder_point=10)

    def test_reserved_above_current_is_rejected(self, item):
        with pytest.raises(ValidationError):
            item.stock = StockLevels(current=5, reserved=6, available=-1, reorder_point=10)
