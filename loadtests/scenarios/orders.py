"""Order lifecycle load test scenarios.

Stateful SequentialTaskSet journeys covering order intake, status
progression, tracking lookups and cancellation with refunds.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import order_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import OrderState


class OrderIntakeMixin:
    """Shared first step: create an order and remember its numbers."""

    state: OrderState

    def create_order(self, **overrides):
        with self.client.post(
            "/orders",
            json=order_data(**overrides),
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Create order failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            self.state.order_id = resp.json()["order_id"]

        with self.client.get(
            f"/orders/{self.state.order_id}",
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code == 200:
                body = resp.json()
                self.state.order_number = body["order_number"]
                self.state.tracking_number = body["tracking_number"]
                self.state.total_amount = body["total_amount"]
            else:
                resp.failure(f"Get order failed: {resp.status_code} — {extract_error_detail(resp)}")

    def move_to(self, status: str, notes: str | None = None):
        with self.client.put(
            f"/orders/{self.state.order_id}/status",
            json={"status": status, "actor": "loadtest", "notes": notes},
            catch_response=True,
            name=f"PUT /orders/{{id}}/status [{status}]",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = status
            else:
                resp.failure(f"Move to {status} failed: {resp.status_code} — {extract_error_detail(resp)}")


class OrderProgressJourney(OrderIntakeMixin, SequentialTaskSet):
    """Create -> Confirm -> Processing -> Note -> Track.

    Models a dispatcher accepting an order and a customer checking on it.
    """

    def on_start(self):
        self.state = OrderState()

    @task
    def create(self):
        self.create_order()

    @task
    def confirm(self):
        self.move_to("confirmed")

    @task
    def process(self):
        self.move_to("processing", notes="Packed at depot")

    @task
    def add_note(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/notes",
            json={"text": "Customer asked for a call on arrival", "author": "dispatcher-01"},
            catch_response=True,
            name="POST /orders/{id}/notes",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Add note failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def track(self):
        with self.client.get(
            f"/orders/track/{self.state.tracking_number}",
            catch_response=True,
            name="GET /orders/track/{reference}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Track failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif resp.json()["status"] != self.state.current_status:
                resp.failure(f"Tracking shows {resp.json()['status']}, expected {self.state.current_status}")

    @task
    def done(self):
        self.interrupt()


class OrderCancellationJourney(OrderIntakeMixin, SequentialTaskSet):
    """Create -> (maybe Confirm) -> Cancel.

    A pending order is refunded in full; once confirmed the refund is zero.
    """

    def on_start(self):
        self.state = OrderState()

    @task
    def create(self):
        self.create_order(num_lines=1)

    @task
    def maybe_confirm(self):
        if random.random() < 0.5:
            self.move_to("confirmed")

    @task
    def cancel(self):
        expected_refund = self.state.total_amount if self.state.current_status == "pending" else 0.0
        with self.client.put(
            f"/orders/{self.state.order_id}/cancel",
            json={"reason": "Customer changed their mind", "actor": "loadtest"},
            catch_response=True,
            name="PUT /orders/{id}/cancel",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Cancel failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif abs(resp.json()["refund_amount"] - expected_refund) > 0.01:
                resp.failure(f"Refund {resp.json()['refund_amount']} != expected {expected_refund}")

    @task
    def cancel_again(self):
        """A cancelled order is terminal, so a second cancel must be rejected."""
        with self.client.put(
            f"/orders/{self.state.order_id}/cancel",
            json={"reason": "Duplicate click"},
            catch_response=True,
            name="PUT /orders/{id}/cancel [repeat]",
        ) as resp:
            if resp.status_code == 409:
                resp.success()
            else:
                resp.failure(f"Repeat cancel returned {resp.status_code}, expected 409")

    @task
    def done(self):
        self.interrupt()


class OrderDeliveryJourney(OrderIntakeMixin, SequentialTaskSet):
    """Create -> Confirm -> Picked up -> In transit -> Out for delivery -> Delivered."""

    def on_start(self):
        self.state = OrderState()

    @task
    def create(self):
        self.create_order()

    @task
    def progress(self):
        for status in ("confirmed", "picked-up", "in-transit", "out-for-delivery", "delivered"):
            self.move_to(status)
            if self.state.current_status != status:
                self.interrupt()

    @task
    def done(self):
        self.interrupt()


class OrderUser(HttpUser):
    """Locust user simulating order desk traffic.

    Weighted distribution:
    - 50% Order progress (most common dispatcher operation)
    - 30% Delivery through to completion
    - 20% Cancellations
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        OrderProgressJourney: 5,
        OrderDeliveryJourney: 3,
        OrderCancellationJourney: 2,
    }
