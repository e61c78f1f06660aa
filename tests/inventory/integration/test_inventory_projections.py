"""Integration tests for inventory projections — movement log, alert log and low stock report."""

from datetime import UTC, datetime

import pytest
from inventory import config, operations
from inventory.projections.low_stock_report import LowStockReport
from inventory.projections.stock_alert_log import StockAlertLog
from inventory.projections.stock_movement_log import StockMovementLog
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


def _log(item_id):
    repo = current_domain.repository_for(StockMovementLog)
    return sorted(repo._dao.query.filter(inventory_item_id=item_id).all().items, key=lambda e: e.occurred_at)


class TestStockMovementLog:
    def test_opening_balance_logged(self, register):
        item_id = register(opening_quantity=20)
        entries = _log(item_id)
        assert [e.entry_type for e in entries] == ["in"]
        assert entries[0].quantity_change == 20
        assert entries[0].current_after == 20

    def test_reservations_logged_without_quantity_change(self, register):
        item_id = register(opening_quantity=20)
        operations.reserve_stock(item_id, 5)
        operations.release_reserved_stock(item_id, 5)
        entries = _log(item_id)
        assert [e.entry_type for e in entries] == ["in", "reserved", "released"]
        assert entries[1].quantity_change == 0
        assert entries[1].available_after == 15

    def test_keeps_entries_the_aggregate_trims(self, register, monkeypatch):
        monkeypatch.setattr(config, "LEDGER_WINDOW", 2)
        item_id = register(opening_quantity=20)
        for _ in range(3):
            operations.add_inventory_movement(item_id, "out", 1)
        assert len(operations.get_item(item_id).movements) == 2
        assert len(_log(item_id)) == 4


class TestStockAlertLog:
    def test_alert_recorded(self, register):
        item_id = register(opening_quantity=2)
        operations.check_alerts(item_id, as_of=datetime(2026, 10, 18, tzinfo=UTC))
        entries = current_domain.repository_for(StockAlertLog)._dao.query.filter(inventory_item_id=item_id).all().items
        assert [(e.kind, e.priority) for e in entries] == [("low-stock", "high")]


class TestLowStockReport:
    def test_low_stock_item_listed(self, register):
        item_id = register(opening_quantity=50, reorder_point=10)
        operations.add_inventory_movement(item_id, "out", 45)
        report = current_domain.repository_for(LowStockReport).get(item_id)
        assert report.status == "low-stock"
        assert report.is_critical is False

    def test_out_of_stock_is_critical(self, register):
        item_id = register(opening_quantity=5, reorder_point=10)
        operations.add_inventory_movement(item_id, "out", 5)
        assert current_domain.repository_for(LowStockReport).get(item_id).is_critical is True

    def test_restocked_item_leaves_report(self, register):
        item_id = register(opening_quantity=5, reorder_point=10)
        operations.add_inventory_movement(item_id, "in", 50)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(LowStockReport).get(item_id)
