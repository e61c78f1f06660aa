"""Committed dispatch events reach the event sink; a failing sink never blocks a change."""

import pytest
from dispatch import operations
from protean.exceptions import ValidationError


class TestOrderEvents:
    def test_creation_is_forwarded(self, new_order, event_sink):
        order_id = new_order()
        assert event_sink.kinds(order_id) == ["OrderCreated"]
        payload = event_sink.emitted[0]["payload"]
        assert payload["order_id"] == order_id
        assert payload["total_amount"] == 115.0

    def test_assignment_is_forwarded(self, new_order, new_vehicle, driver_id, event_sink):
        order_id, vehicle_id = new_order(), new_vehicle()
        operations.assign_order(order_id, driver_id, vehicle_id)
        assert "OrderAssigned" in event_sink.kinds(order_id)
        assert "OrderStatusChanged" in event_sink.kinds(order_id)
        assert "VehicleStatusChanged" in event_sink.kinds(vehicle_id)

    def test_cancellation_is_forwarded(self, new_order, event_sink):
        order_id = new_order()
        operations.cancel_order(order_id, "Customer changed mind")
        cancelled = [e for e in event_sink.emitted if e["kind"] == "OrderCancelled"]
        assert cancelled[0]["payload"]["refund_amount"] == 115.0

    def test_failed_change_emits_nothing(self, new_order, event_sink):
        order_id = new_order()
        event_sink.clear()
        with pytest.raises(ValidationError):
            operations.update_order_status(order_id, "delivered-yesterday")
        assert event_sink.emitted == []


class TestSinkOutage:
    def test_change_commits_when_sink_is_down(self, new_order, event_sink):
        event_sink.configure(should_succeed=False)
        order_id = new_order()
        operations.update_order_status(order_id, "confirmed")
        assert operations.get_order(order_id).status == "confirmed"
        assert event_sink.emitted == []


class TestRouteEvents:
    def test_route_lifecycle_is_forwarded(self, planned_route, event_sink):
        route_id = planned_route()
        operations.optimize_route(route_id)
        assert event_sink.kinds(route_id) == ["RouteCreated", "RouteStatusChanged", "RouteOptimized"]
