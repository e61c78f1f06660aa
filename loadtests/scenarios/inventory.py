"""Inventory ledger load test scenarios.

Three stateful SequentialTaskSet journeys covering receiving and issuing
stock, the reservation lifecycle, and contention on a shared hot item.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import movement_data, register_item_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import InventoryState


class ItemRegistrationMixin:
    state: InventoryState

    def register_item(self, opening_quantity: int, reorder_point: int = 10):
        payload = register_item_data(opening_quantity=opening_quantity, reorder_point=reorder_point)
        with self.client.post(
            "/inventory",
            json=payload,
            catch_response=True,
            name="POST /inventory",
        ) as resp:
            if resp.status_code == 201:
                self.state.inventory_item_id = resp.json()["inventory_item_id"]
                self.state.sku = payload["sku"]
                self.state.current = opening_quantity
            else:
                resp.failure(f"Register item failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    def check_levels(self, body: dict):
        """Every ledger response must satisfy available == current - reserved >= 0."""
        if body["available"] != body["current"] - body["reserved"] or body["available"] < 0:
            return f"Inconsistent levels: {body}"
        return None


class ReceiveAndIssueJourney(ItemRegistrationMixin, SequentialTaskSet):
    """Register -> Receive -> Issue -> Damage -> Alerts check.

    Models a stock controller booking a delivery in and picking against it.
    """

    def on_start(self):
        self.state = InventoryState()

    @task
    def register(self):
        self.register_item(opening_quantity=100)

    @task
    def receive(self):
        self._post_movement("in", random.randint(10, 100))

    @task
    def issue(self):
        self._post_movement("out", random.randint(1, 20))

    @task
    def damage(self):
        self._post_movement("damaged", random.randint(1, 3))

    @task
    def check_alerts(self):
        with self.client.post(
            f"/inventory/{self.state.inventory_item_id}/alerts/check",
            json={},
            catch_response=True,
            name="POST /inventory/{id}/alerts/check",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Alert check failed: {resp.status_code} — {extract_error_detail(resp)}")

    def _post_movement(self, movement_type: str, quantity: int):
        with self.client.post(
            f"/inventory/{self.state.inventory_item_id}/movements",
            json=movement_data(movement_type, quantity),
            catch_response=True,
            name=f"POST /inventory/{{id}}/movements [{movement_type}]",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"{movement_type} movement failed: {resp.status_code} — {extract_error_detail(resp)}")
                return
            body = resp.json()
            problem = self.check_levels(body)
            if problem:
                resp.failure(problem)
            self.state.current = body["current"]
            self.state.reserved = body["reserved"]

    @task
    def done(self):
        self.interrupt()


class ReservationJourney(ItemRegistrationMixin, SequentialTaskSet):
    """Register -> Reserve -> Over-reserve (rejected) -> Release."""

    def on_start(self):
        self.state = InventoryState()

    @task
    def register(self):
        self.register_item(opening_quantity=50)

    @task
    def reserve(self):
        qty = random.randint(1, 10)
        with self.client.post(
            f"/inventory/{self.state.inventory_item_id}/reserve",
            json={"quantity": qty, "reason": "Order allocation", "actor": "loadtest"},
            catch_response=True,
            name="POST /inventory/{id}/reserve",
        ) as resp:
            if resp.status_code == 200:
                self.state.reserved += qty
            else:
                resp.failure(f"Reserve failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def over_reserve(self):
        with self.client.post(
            f"/inventory/{self.state.inventory_item_id}/reserve",
            json={"quantity": self.state.available + 1},
            catch_response=True,
            name="POST /inventory/{id}/reserve [over]",
        ) as resp:
            if resp.status_code == 422:
                resp.success()
            else:
                resp.failure(f"Over-reservation returned {resp.status_code}, expected 422")

    @task
    def release(self):
        with self.client.post(
            f"/inventory/{self.state.inventory_item_id}/release",
            json={"quantity": self.state.reserved, "reason": "Order cancelled"},
            catch_response=True,
            name="POST /inventory/{id}/release",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Release failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif resp.json()["reserved"] != 0:
                resp.failure(f"Reserved should be 0 after release, got {resp.json()['reserved']}")

    @task
    def done(self):
        self.interrupt()


class HotItemUser(HttpUser):
    """Many users reserving from one item.

    Each user registers its own hot item on start, then hammers it with
    small reservations until stock runs out. A 422 once stock is exhausted is
    the expected outcome and counts as success; a 409 means the per-item lock
    timed out.
    """

    wait_time = between(0.05, 0.2)

    def on_start(self):
        resp = self.client.post(
            "/inventory",
            json=register_item_data(opening_quantity=200, reorder_point=20),
            name="[HOT] POST /inventory",
        )
        self.item_id = resp.json()["inventory_item_id"] if resp.status_code == 201 else None

    @task
    def reserve_one(self):
        if self.item_id is None:
            return
        with self.client.post(
            f"/inventory/{self.item_id}/reserve",
            json={"quantity": 1},
            catch_response=True,
            name="[HOT] POST /inventory/{id}/reserve",
        ) as resp:
            if resp.status_code in (200, 422):
                resp.success()
            else:
                resp.failure(f"Hot reserve failed: {resp.status_code} — {extract_error_detail(resp)}")


class InventoryUser(HttpUser):
    """Locust user simulating warehouse ledger traffic.

    Weighted distribution:
    - 60% Receive and issue (most common warehouse operation)
    - 40% Reservation lifecycle (order flow)
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        ReceiveAndIssueJourney: 3,
        ReservationJourney: 2,
    }
