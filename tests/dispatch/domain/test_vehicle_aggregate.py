"""Tests for the Vehicle aggregate — availability, claims and trip metrics."""

import pytest
from dispatch.vehicle.events import VehicleStatusChanged, VehicleTripRecorded
from dispatch.vehicle.vehicle import Vehicle, VehicleStatus
from protean.exceptions import ValidationError
from shared.errors import InvalidTransition, VehicleUnavailable


@pytest.fixture()
def vehicle():
    return Vehicle.register("KDA 001A", capacity_weight=1000.0, capacity_volume=12.0)


class TestRegistration:
    def test_registered_vehicle_is_available(self, vehicle):
        assert vehicle.status == VehicleStatus.AVAILABLE.value
        assert vehicle.capacity.weight == 1000.0
        assert vehicle.metrics.total_trips == 0

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValidationError):
            Vehicle.register("KDA 002A", capacity_weight=0)


class TestClaim:
    def test_claim_moves_to_assigned(self, vehicle):
        vehicle.claim("drv-001", "ord-001", route_id="rte-001")
        assert vehicle.status == "assigned"
        assert vehicle.assigned_driver_id == "drv-001"
        assert vehicle.current_order_id == "ord-001"
        assert vehicle.current_route_id == "rte-001"

    def test_second_claim_fails(self, vehicle):
        vehicle.claim("drv-001", "ord-001")
        with pytest.raises(VehicleUnavailable):
            vehicle.claim("drv-002", "ord-002")
        assert vehicle.current_order_id == "ord-001"

    def test_vehicle_in_maintenance_cannot_be_claimed(self, vehicle):
        vehicle.change_status("maintenance")
        with pytest.raises(VehicleUnavailable):
            vehicle.claim("drv-001", "ord-001")

    def test_fits(self, vehicle):
        assert vehicle.fits(1000.0)
        assert not vehicle.fits(1200.0)


class TestRelease:
    def test_release_clears_driver_and_holds(self, vehicle):
        vehicle.claim("drv-001", "ord-001")
        vehicle.release()
        assert vehicle.status == "available"
        assert vehicle.assigned_driver_id is None
        assert vehicle.current_order_id is None

    def test_release_is_idempotent(self, vehicle):
        vehicle.claim("drv-001", "ord-001")
        vehicle.release()
        vehicle._events.clear()
        vehicle.release()
        assert vehicle.status == "available"
        assert vehicle._events == []


class TestTrips:
    def test_depart_requires_assignment(self, vehicle):
        with pytest.raises(VehicleUnavailable):
            vehicle.depart("rte-001")

    def test_depart_from_loading(self, vehicle):
        vehicle.claim("drv-001", "ord-001")
        vehicle.change_status("loading")
        vehicle.depart("rte-001")
        assert vehicle.status == "in-transit"

    def test_finish_trip_folds_metrics_and_frees_vehicle(self, vehicle):
        vehicle.claim("drv-001", "ord-001", route_id="rte-001")
        vehicle.depart("rte-001")
        vehicle.finish_trip("rte-001", distance=42.0, fuel_consumed=4.2)
        assert vehicle.status == "available"
        assert vehicle.assigned_driver_id is None
        assert vehicle.metrics.total_trips == 1
        assert vehicle.metrics.total_distance == 42.0
        assert vehicle.metrics.total_fuel_consumed == pytest.approx(4.2)
        assert any(isinstance(e, VehicleTripRecorded) for e in vehicle._events)


    def test_finish_trip_keeps_vehicle_bound_to_another_route(self, vehicle):
        vehicle.claim("drv-002", "ord-002", route_id="rte-002")
        vehicle.finish_trip("rte-001", distance=10.0, fuel_consumed=1.0)
        assert vehicle.status == "assigned"
        assert vehicle.current_order_id == "ord-002"
        assert vehicle.current_route_id == "rte-002"
        assert vehicle.metrics.total_trips == 1

    def test_detach_order_keeps_route(self, vehicle):
        vehicle.claim("drv-001", "ord-001", route_id="rte-001")
        vehicle.depart("rte-001")
        vehicle.detach_order("ord-001")
        assert vehicle.status == "in-transit"
        assert vehicle.current_order_id is None
        assert vehicle.current_route_id == "rte-001"
        assert vehicle.assigned_driver_id == "drv-001"

    def test_detach_other_order_is_ignored(self, vehicle):
        vehicle.claim("drv-001", "ord-001")
        vehicle.detach_order("ord-999")
        assert vehicle.current_order_id == "ord-001"


class TestOperatorStatus:
    def test_maintenance_round_trip(self, vehicle):
        vehicle.change_status("maintenance", reason="Brake pads")
        vehicle.change_status("available")
        changes = [e for e in vehicle._events if isinstance(e, VehicleStatusChanged)]
        assert [c.new_status for c in changes] == ["maintenance", "available"]

    def test_cannot_force_in_transit(self, vehicle):
        with pytest.raises(InvalidTransition):
            vehicle.change_status("in-transit")

    def test_cannot_send_assigned_vehicle_to_maintenance(self, vehicle):
        vehicle.claim("drv-001", "ord-001")
        with pytest.raises(InvalidTransition):
            vehicle.change_status("maintenance")

    def test_unknown_status_rejected(self, vehicle):
        with pytest.raises(ValidationError):
            vehicle.change_status("flying")
