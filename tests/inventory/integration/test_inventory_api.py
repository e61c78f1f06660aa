"""Integration tests for Inventory API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from inventory.api.routes import inventory_router
from inventory.stock.stock import InventoryItem
from protean import current_domain
from shared.api import register_error_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(inventory_router)
    return TestClient(app)


def _register_item(client, **overrides):
    """Helper: POST /inventory and return the inventory_item_id."""
    defaults = {
        "sku": "BOLT-M8",
        "name": "M8 hex bolt",
        "opening_quantity": 100,
        "reorder_point": 10,
    }
    defaults.update(overrides)
    response = client.post("/inventory", json=defaults)
    assert response.status_code == 201
    return response.json()["inventory_item_id"]


class TestRegisterEndpoint:
    def test_register(self, client):
        item_id = _register_item(client)
        item = current_domain.repository_for(InventoryItem).get(item_id)
        assert item.sku == "BOLT-M8"
        assert item.stock.current == 100

    def test_register_with_alert_settings(self, client):
        item_id = _register_item(client, alert_settings={"low_stock_threshold": 40})
        item = current_domain.repository_for(InventoryItem).get(item_id)
        assert item.alert_settings.low_stock_threshold == 40

    def test_duplicate_sku(self, client):
        _register_item(client)
        response = client.post("/inventory", json={"sku": "bolt-m8", "name": "Again"})
        assert response.status_code == 400

    def test_negative_opening_stock_is_rejected_by_schema(self, client):
        response = client.post("/inventory", json={"sku": "X", "name": "X", "opening_quantity": -1})
        assert response.status_code == 422


class TestReadEndpoints:
    def test_get_item(self, client):
        item_id = _register_item(client)
        body = client.get(f"/inventory/{item_id}").json()
        assert body["available"] == 100
        assert body["status"] == "active"
        assert [m["movement_type"] for m in body["recent_movements"]] == ["in"]

    def test_get_by_sku(self, client):
        item_id = _register_item(client)
        response = client.get("/inventory/sku/bolt-m8")
        assert response.status_code == 200
        assert response.json()["inventory_item_id"] == item_id

    def test_unknown_sku(self, client):
        response = client.get("/inventory/sku/NOPE")
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_unknown_item(self, client):
        assert client.get("/inventory/missing").status_code == 404


class TestStockEndpoints:
    def test_add_movement(self, client):
        item_id = _register_item(client)
        response = client.post(f"/inventory/{item_id}/movements", json={"movement_type": "out", "quantity": 95})
        assert response.status_code == 201
        body = response.json()
        assert body["current"] == 5
        assert body["status"] == "low-stock"
        assert body["effect"] == -95

    def test_overdraw_is_unprocessable(self, client):
        item_id = _register_item(client)
        response = client.post(f"/inventory/{item_id}/movements", json={"movement_type": "out", "quantity": 101})
        assert response.status_code == 422
        assert response.json()["error"] == "InsufficientStock"

    def test_reserve_and_release(self, client):
        item_id = _register_item(client)
        response = client.post(f"/inventory/{item_id}/reserve", json={"quantity": 30})
        assert response.status_code == 200
        assert response.json()["available"] == 70

        response = client.post(f"/inventory/{item_id}/release", json={"quantity": 50})
        assert response.json()["released"] == 30
        assert response.json()["available"] == 100

    def test_check_alerts(self, client):
        item_id = _register_item(client, opening_quantity=3)
        response = client.post(f"/inventory/{item_id}/alerts/check", json={"as_of": "2026-10-18T09:00:00+00:00"})
        assert response.status_code == 200
        assert [a["kind"] for a in response.json()["alerts"]] == ["low-stock"]


class TestLifecycleEndpoints:
    def test_deactivate_then_reserve_is_conflict(self, client):
        item_id = _register_item(client)
        assert client.put(f"/inventory/{item_id}/deactivate", json={"reason": "Recall"}).status_code == 200
        response = client.post(f"/inventory/{item_id}/reserve", json={"quantity": 1})
        assert response.status_code == 409

    def test_reactivate(self, client):
        item_id = _register_item(client)
        client.put(f"/inventory/{item_id}/deactivate")
        response = client.put(f"/inventory/{item_id}/reactivate")
        assert response.json()["status"] == "reactivated"
        assert client.get(f"/inventory/{item_id}").json()["status"] == "active"

    def test_discontinue(self, client):
        item_id = _register_item(client)
        response = client.put(f"/inventory/{item_id}/discontinue", json={"reason": "End of line"})
        assert response.json()["status"] == "discontinued"
