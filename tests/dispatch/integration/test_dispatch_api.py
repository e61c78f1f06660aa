"""Integration tests for the Dispatch API endpoints via TestClient."""

import pytest
from dispatch import operations
from dispatch.api.routes import order_router, route_router, vehicle_router
from fastapi import FastAPI
from fastapi.testclient import TestClient
from shared.api import register_error_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(order_router)
    app.include_router(route_router)
    app.include_router(vehicle_router)
    return TestClient(app)


def _stop_json(name, hour, latitude, longitude):
    return {
        "name": name,
        "address": f"{name}, 1 Dock Road",
        "latitude": latitude,
        "longitude": longitude,
        "contact_name": "Amina",
        "contact_phone": "+254700000001",
        "window_start": f"2026-10-19T{hour:02d}:00:00+00:00",
        "window_end": f"2026-10-19T{hour + 2:02d}:00:00+00:00",
    }


def _create_order(client, weight=100.0):
    response = client.post(
        "/orders",
        json={
            "customer_id": "cust-001",
            "pickup": _stop_json("Warehouse A", 9, -1.2921, 36.8219),
            "delivery": _stop_json("Shop B", 13, -1.3000, 36.8000),
            "cargo": [{"name": "Maize flour", "quantity": 2, "weight": weight / 2}],
            "pricing": {"base_price": 100.0, "taxes": 15.0},
            "created_by": "dispatcher-1",
        },
    )
    assert response.status_code == 201
    return response.json()["order_id"]


def _register_vehicle(client, registration="KDA 001A", capacity_weight=1000.0):
    response = client.post("/vehicles", json={"registration_number": registration, "capacity_weight": capacity_weight})
    assert response.status_code == 201
    return response.json()["vehicle_id"]


def _create_route(client):
    response = client.post(
        "/routes",
        json={
            "name": "Nairobi morning run",
            "planned_start": "2026-10-19T10:00:00+00:00",
            "planned_end": "2026-10-19T12:00:00+00:00",
            "waypoints": [
                {"latitude": -1.3000, "longitude": 36.8000, "waypoint_type": "delivery", "name": "Shop B"},
                {"latitude": -1.2921, "longitude": 36.8219, "waypoint_type": "pickup", "name": "Depot"},
            ],
        },
    )
    assert response.status_code == 201
    return response.json()["route_id"]


class TestOrderEndpoints:
    def test_create_and_fetch(self, client):
        order_id = _create_order(client)
        response = client.get(f"/orders/{order_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "pending"
        assert body["total_weight"] == 100.0
        assert body["total_amount"] == 115.0
        assert [e["status"] for e in body["history"]] == ["pending"]

    def test_track_by_tracking_number(self, client):
        order_id = _create_order(client)
        tracking = client.get(f"/orders/{order_id}").json()["tracking_number"]
        response = client.get(f"/orders/track/{tracking}")
        assert response.status_code == 200
        assert response.json()["order_id"] == order_id

    def test_track_unknown(self, client):
        response = client.get("/orders/track/TRK000000000000")
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_unknown_order(self, client):
        assert client.get("/orders/missing").status_code == 404

    def test_malformed_body(self, client):
        response = client.post("/orders", json={"customer_id": "cust-001"})
        assert response.status_code == 422

    def test_status_update(self, client):
        order_id = _create_order(client)
        response = client.put(f"/orders/{order_id}/status", json={"status": "confirmed", "actor": "dispatcher-1"})
        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"

    def test_illegal_transition_is_conflict(self, client):
        order_id = _create_order(client)
        response = client.put(f"/orders/{order_id}/status", json={"status": "confirmed"})
        assert response.status_code == 200
        response = client.put(f"/orders/{order_id}/status", json={"status": "pending"})
        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "InvalidTransition"
        assert body["retryable"] is False

    def test_unknown_status_is_bad_request(self, client):
        order_id = _create_order(client)
        response = client.put(f"/orders/{order_id}/status", json={"status": "lost"})
        assert response.status_code == 400

    def test_cancel(self, client):
        order_id = _create_order(client)
        response = client.put(f"/orders/{order_id}/cancel", json={"reason": "Changed mind"})
        assert response.status_code == 200
        assert response.json()["refund_amount"] == 115.0

    def test_note(self, client):
        order_id = _create_order(client)
        response = client.post(f"/orders/{order_id}/notes", json={"text": "Gate code 1234"})
        assert response.status_code == 201


class TestAssignmentEndpoints:
    def test_assign_and_release(self, client, driver_id):
        order_id, vehicle_id = _create_order(client), _register_vehicle(client)

        response = client.put(f"/orders/{order_id}/assign", json={"driver_id": driver_id, "vehicle_id": vehicle_id})
        assert response.status_code == 200
        assert response.json()["status"] == "assigned"
        assert client.get(f"/vehicles/{vehicle_id}").json()["status"] == "assigned"

        response = client.put(f"/orders/{order_id}/release", json={"reason": "Driver sick"})
        assert response.status_code == 200
        assert response.json()["released"] is True
        assert client.get(f"/vehicles/{vehicle_id}").json()["status"] == "available"

    def test_overweight_is_unprocessable(self, client, driver_id):
        order_id = _create_order(client, weight=1200.0)
        vehicle_id = _register_vehicle(client)
        response = client.put(f"/orders/{order_id}/assign", json={"driver_id": driver_id, "vehicle_id": vehicle_id})
        assert response.status_code == 422
        assert response.json()["error"] == "CapacityExceeded"

    def test_busy_vehicle_is_conflict(self, client, driver_id):
        vehicle_id = _register_vehicle(client)
        first, second = _create_order(client), _create_order(client)
        client.put(f"/orders/{first}/assign", json={"driver_id": driver_id, "vehicle_id": vehicle_id})
        response = client.put(f"/orders/{second}/assign", json={"driver_id": driver_id, "vehicle_id": vehicle_id})
        assert response.status_code == 409
        assert response.json()["error"] == "VehicleUnavailable"

    def test_directory_outage_is_retryable(self, client, driver_id, directory):
        order_id, vehicle_id = _create_order(client), _register_vehicle(client)
        directory.configure(should_succeed=False)
        response = client.put(f"/orders/{order_id}/assign", json={"driver_id": driver_id, "vehicle_id": vehicle_id})
        assert response.status_code == 503
        assert response.json()["retryable"] is True


class TestRouteEndpoints:
    def test_full_route(self, client, driver_id):
        order_id, vehicle_id, route_id = _create_order(client), _register_vehicle(client), _create_route(client)

        assert client.put(f"/routes/{route_id}/plan").status_code == 200
        optimized = client.post(f"/routes/{route_id}/optimize")
        assert optimized.status_code == 200
        assert optimized.json()["total_distance"] > 0

        route = client.get(f"/routes/{route_id}").json()
        assert [w["name"] for w in route["waypoints"]] == ["Depot", "Shop B"]

        client.put(
            f"/orders/{order_id}/assign",
            json={"driver_id": driver_id, "vehicle_id": vehicle_id, "route_id": route_id},
        )
        assert client.put(f"/routes/{route_id}/start").status_code == 200
        assert client.get(f"/vehicles/{vehicle_id}").json()["status"] == "in-transit"

        waypoint_id = route["waypoints"][0]["waypoint_id"]
        response = client.put(f"/routes/{route_id}/waypoints/{waypoint_id}/status", json={"status": "completed"})
        assert response.json()["progress"] == 50

        response = client.put(f"/routes/{route_id}/location", json={"latitude": -1.29, "longitude": 36.82})
        assert response.status_code == 200

        response = client.put(f"/routes/{route_id}/complete", json={"notes": "Smooth run"})
        assert response.status_code == 200
        assert client.get(f"/routes/{route_id}").json()["status"] == "completed"
        vehicle = client.get(f"/vehicles/{vehicle_id}").json()
        assert vehicle["status"] == "available"
        assert vehicle["total_trips"] == 1

    def test_start_unassigned_route_is_conflict(self, client):
        route_id = _create_route(client)
        assert client.put(f"/routes/{route_id}/start").status_code == 409

    def test_pause_resume_cancel(self, client):
        route_id = _create_route(client)
        assert client.put(f"/routes/{route_id}/pause", json={"reason": "Weather"}).json()["status"] == "paused"
        assert client.put(f"/routes/{route_id}/resume").json()["status"] == "draft"
        response = client.put(f"/routes/{route_id}/cancel", json={"reason": "Not needed"})
        assert response.json()["status"] == "cancelled"
        assert operations.get_route(route_id).status == "cancelled"


class TestVehicleEndpoints:
    def test_register_and_fetch(self, client):
        vehicle_id = _register_vehicle(client, registration="kdc 333c")
        body = client.get(f"/vehicles/{vehicle_id}").json()
        assert body["registration_number"] == "KDC 333C"
        assert body["status"] == "available"

    def test_status_change(self, client):
        vehicle_id = _register_vehicle(client)
        response = client.put(f"/vehicles/{vehicle_id}/status", json={"status": "maintenance", "reason": "Tyres"})
        assert response.status_code == 200
        assert client.get(f"/vehicles/{vehicle_id}").json()["status"] == "maintenance"

    def test_forbidden_status_change(self, client):
        vehicle_id = _register_vehicle(client)
        response = client.put(f"/vehicles/{vehicle_id}/status", json={"status": "in-transit"})
        assert response.status_code == 409
