"""Route and vehicle load test scenarios.

Route planning is the heaviest read-modify-write path in dispatch:
optimization recomputes the stop order and estimates for every waypoint.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import route_data, vehicle_data, waypoint_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import RouteState, VehicleState


class RoutePlanningJourney(SequentialTaskSet):
    """Create -> Add stop -> Plan -> Optimize -> Optimize again -> Get.

    Models a planner building a route and re-running optimization,
    which must return the same plan both times.
    """

    def on_start(self):
        self.state = RouteState()
        self.first_plan = None

    @task
    def create_route(self):
        with self.client.post(
            "/routes",
            json=route_data(num_waypoints=random.randint(3, 8)),
            catch_response=True,
            name="POST /routes",
        ) as resp:
            if resp.status_code == 201:
                self.state.route_id = resp.json()["route_id"]
            else:
                resp.failure(f"Create route failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def add_waypoint(self):
        with self.client.post(
            f"/routes/{self.state.route_id}/waypoints",
            json=waypoint_data(waypoint_type="delivery"),
            catch_response=True,
            name="POST /routes/{id}/waypoints",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Add waypoint failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def plan(self):
        with self.client.put(
            f"/routes/{self.state.route_id}/plan",
            catch_response=True,
            name="PUT /routes/{id}/plan",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = "planned"
            else:
                resp.failure(f"Plan failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def optimize(self):
        with self.client.post(
            f"/routes/{self.state.route_id}/optimize",
            catch_response=True,
            name="POST /routes/{id}/optimize",
        ) as resp:
            if resp.status_code == 200:
                self.first_plan = resp.json()
            else:
                resp.failure(f"Optimize failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def optimize_again(self):
        with self.client.post(
            f"/routes/{self.state.route_id}/optimize",
            catch_response=True,
            name="POST /routes/{id}/optimize [repeat]",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Re-optimize failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif self.first_plan is not None and resp.json() != self.first_plan:
                resp.failure("Re-optimizing changed the plan")

    @task
    def get_route(self):
        with self.client.get(
            f"/routes/{self.state.route_id}",
            catch_response=True,
            name="GET /routes/{id}",
        ) as resp:
            if resp.status_code == 200:
                self.state.waypoint_ids = [wp["waypoint_id"] for wp in resp.json()["waypoints"]]
            else:
                resp.failure(f"Get route failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class RouteInterruptionJourney(SequentialTaskSet):
    """Create -> Plan -> Pause -> Resume -> Cancel."""

    def on_start(self):
        self.state = RouteState()

    @task
    def create_and_plan(self):
        resp = self.client.post("/routes", json=route_data(num_waypoints=2), name="POST /routes")
        if resp.status_code != 201:
            self.interrupt()
        self.state.route_id = resp.json()["route_id"]
        self.client.put(f"/routes/{self.state.route_id}/plan", name="PUT /routes/{id}/plan")

    @task
    def pause(self):
        with self.client.put(
            f"/routes/{self.state.route_id}/pause",
            json={"reason": "Driver unavailable"},
            catch_response=True,
            name="PUT /routes/{id}/pause",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Pause failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def resume(self):
        with self.client.put(
            f"/routes/{self.state.route_id}/resume",
            catch_response=True,
            name="PUT /routes/{id}/resume",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Resume failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif resp.json()["status"] != "planned":
                resp.failure(f"Resumed into {resp.json()['status']}, expected planned")

    @task
    def cancel(self):
        with self.client.put(
            f"/routes/{self.state.route_id}/cancel",
            json={"reason": "Consolidated into another run"},
            catch_response=True,
            name="PUT /routes/{id}/cancel",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Cancel route failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class VehicleMaintenanceJourney(SequentialTaskSet):
    """Register -> Maintenance -> Available -> Get."""

    def on_start(self):
        self.state = VehicleState()

    @task
    def register(self):
        with self.client.post(
            "/vehicles",
            json=vehicle_data(),
            catch_response=True,
            name="POST /vehicles",
        ) as resp:
            if resp.status_code == 201:
                self.state.vehicle_id = resp.json()["vehicle_id"]
            else:
                resp.failure(f"Register vehicle failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def to_maintenance(self):
        self._change_status("maintenance", "Scheduled service")

    @task
    def back_to_service(self):
        self._change_status("available", "Service complete")

    @task
    def get_vehicle(self):
        with self.client.get(
            f"/vehicles/{self.state.vehicle_id}",
            catch_response=True,
            name="GET /vehicles/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get vehicle failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif resp.json()["status"] != self.state.current_status:
                resp.failure(f"Vehicle is {resp.json()['status']}, expected {self.state.current_status}")

    def _change_status(self, status: str, reason: str):
        with self.client.put(
            f"/vehicles/{self.state.vehicle_id}/status",
            json={"status": status, "reason": reason},
            catch_response=True,
            name=f"PUT /vehicles/{{id}}/status [{status}]",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = status
            else:
                resp.failure(f"Vehicle to {status} failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class RouteUser(HttpUser):
    """Locust user simulating route planners and fleet managers.

    Weighted distribution:
    - 55% Route planning with optimization
    - 25% Route interruptions
    - 20% Vehicle maintenance cycles
    """

    wait_time = between(1.0, 3.0)
    tasks = {
        RoutePlanningJourney: 11,
        RouteInterruptionJourney: 5,
        VehicleMaintenanceJourney: 4,
    }
