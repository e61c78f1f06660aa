"""Committed inventory events reach the event sink."""

from inventory import operations


class TestInventoryForwarding:
    def test_registration(self, register, event_sink):
        item_id = register(opening_quantity=5)
        kinds = event_sink.kinds(item_id)
        assert kinds[0] == "ItemRegistered"
        assert "StockMovementRecorded" in kinds

    def test_reservation_and_release(self, register, event_sink):
        item_id = register(opening_quantity=50)
        event_sink.clear()
        operations.reserve_stock(item_id, 5)
        operations.release_reserved_stock(item_id, 5)
        assert event_sink.kinds(item_id) == ["StockReserved", "ReservedStockReleased"]

    def test_status_change(self, register, event_sink):
        item_id = register(opening_quantity=50, reorder_point=10)
        operations.add_inventory_movement(item_id, "out", 45)
        changed = [e for e in event_sink.emitted if e["kind"] == "ItemStatusChanged"]
        assert changed[-1]["payload"]["new_status"] == "low-stock"

    def test_sink_outage_does_not_block_stock_changes(self, register, event_sink):
        item_id = register(opening_quantity=50)
        event_sink.configure(should_succeed=False)
        operations.add_inventory_movement(item_id, "out", 5)
        assert operations.get_item(item_id).stock.current == 45
