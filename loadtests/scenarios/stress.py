"""Stress test scenarios for write throughput.

EventFloodUser creates new aggregates as fast as possible so every request
emits at least one event to the sink. SpikeUser simulates a sudden burst of
order intake.
"""

from locust import HttpUser, constant_pacing, task

from loadtests.data_generators import (
    movement_data,
    order_data,
    register_item_data,
    route_data,
    vehicle_data,
)


class EventFloodUser(HttpUser):
    """Stress test: maximum event throughput.

    No sequential dependencies: every task creates a new aggregate to avoid
    lock contention, so latency reflects the write path alone.
    """

    wait_time = constant_pacing(0.1)  # ~10 requests/sec per user

    @task(5)
    def create_order(self):
        """1 event: OrderCreated."""
        self.client.post("/orders", json=order_data(), name="[STRESS] POST /orders")

    @task(3)
    def create_order_and_confirm(self):
        """2 events: OrderCreated + OrderStatusChanged."""
        resp = self.client.post("/orders", json=order_data(num_lines=1), name="[STRESS] POST /orders+confirm")
        if resp.status_code == 201:
            oid = resp.json()["order_id"]
            self.client.put(
                f"/orders/{oid}/status",
                json={"status": "confirmed"},
                name="[STRESS] PUT /orders/{id}/status",
            )

    @task(2)
    def create_route(self):
        """1 event: RouteCreated."""
        self.client.post("/routes", json=route_data(num_waypoints=3), name="[STRESS] POST /routes")

    @task(1)
    def register_vehicle(self):
        """1 event: VehicleRegistered."""
        self.client.post("/vehicles", json=vehicle_data(), name="[STRESS] POST /vehicles")

    @task(3)
    def register_and_receive(self):
        """2 events: ItemRegistered + StockMovementRecorded."""
        resp = self.client.post(
            "/inventory",
            json=register_item_data(opening_quantity=100),
            name="[STRESS] POST /inventory",
        )
        if resp.status_code == 201:
            iid = resp.json()["inventory_item_id"]
            self.client.post(
                f"/inventory/{iid}/movements",
                json=movement_data("in", 50),
                name="[STRESS] POST /inventory/{id}/movements",
            )


class SpikeUser(HttpUser):
    """Spike test: rapid-fire order intake.

    Use with high user count and instant spawn rate. Spawn 50-100 of these
    simultaneously to see how order numbering holds up under a burst.
    """

    wait_time = constant_pacing(0.05)  # ~20 req/sec per user

    @task
    def rapid_order(self):
        self.client.post("/orders", json=order_data(num_lines=1), name="[SPIKE] POST /orders")
