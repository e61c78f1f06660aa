"""Tests for waypoint ordering and distance/duration/cost estimates."""

import json
from types import SimpleNamespace

import pytest
from dispatch import config
from dispatch.route import optimization
from dispatch.route.events import RouteOptimized
from dispatch.route.route import Route
from shared.errors import InvalidTransition


def _stop(kind, lat=0.0, lng=0.0):
    return SimpleNamespace(waypoint_type=kind, latitude=lat, longitude=lng)


class TestHaversine:
    def test_same_point_is_zero(self):
        assert optimization.haversine_km(-1.29, 36.82, -1.29, 36.82) == 0

    def test_one_degree_of_latitude(self):
        assert optimization.haversine_km(0, 0, 1, 0) == pytest.approx(111.19, abs=0.01)

    def test_symmetric(self):
        there = optimization.haversine_km(-1.29, 36.82, -4.04, 39.67)
        back = optimization.haversine_km(-4.04, 39.67, -1.29, 36.82)
        assert there == pytest.approx(back)

    def test_path_distance_sums_legs(self):
        points = [(0, 0), (1, 0), (2, 0)]
        assert optimization.path_distance(points) == pytest.approx(2 * 111.19, abs=0.02)

    def test_path_distance_of_single_point(self):
        assert optimization.path_distance([(0, 0)]) == 0


class TestOrdering:
    def test_pickups_then_deliveries_then_others(self):
        fuel = _stop("fuel-stop")
        drop = _stop("delivery")
        collect = _stop("pickup")
        assert optimization.order_waypoints([fuel, drop, collect]) == [collect, drop, fuel]

    def test_stable_within_a_group(self):
        first, second = _stop("delivery", lat=1), _stop("delivery", lat=2)
        assert optimization.order_waypoints([first, second]) == [first, second]


class TestEstimates:
    def test_estimates_use_configured_rates(self):
        estimates = optimization.estimate(100.0)
        assert estimates["total_distance"] == 100.0
        assert estimates["estimated_duration"] == pytest.approx(100.0 / config.AVERAGE_SPEED_KMH * 60)
        assert estimates["estimated_fuel_cost"] == pytest.approx(
            100.0 / config.FUEL_EFFICIENCY_KM_PER_L * config.FUEL_PRICE_PER_L
        )

    def test_fuel_for(self):
        assert optimization.fuel_for(50.0) == pytest.approx(50.0 / config.FUEL_EFFICIENCY_KM_PER_L)


class TestOptimizeRoute:
    @pytest.fixture()
    def route(self, make_route_data):
        waypoints = [
            {"latitude": -1.31, "longitude": 36.79, "waypoint_type": "rest-stop", "name": "Lay-by"},
            {"latitude": -1.30, "longitude": 36.80, "waypoint_type": "delivery", "name": "Shop B"},
            {"latitude": -1.29, "longitude": 36.82, "waypoint_type": "pickup", "name": "Depot"},
        ]
        return Route.create(**make_route_data(waypoints=waypoints))

    def test_reorders_and_renumbers(self, route):
        route.optimize()
        assert [w.name for w in route.ordered_waypoints()] == ["Depot", "Shop B", "Lay-by"]
        assert [w.sequence for w in route.ordered_waypoints()] == [1, 2, 3]

    def test_stores_summary(self, route):
        estimates = route.optimize()
        assert route.optimization.total_distance == pytest.approx(estimates["total_distance"])
        assert route.optimization.optimized_at is not None

    def test_second_pass_changes_nothing(self, route):
        first = route.optimize()
        order = [str(w.id) for w in route.ordered_waypoints()]
        second = route.optimize()
        assert [str(w.id) for w in route.ordered_waypoints()] == order
        assert second == pytest.approx(first)

    def test_event_carries_new_order(self, route):
        route.optimize()
        event = next(e for e in route._events if isinstance(e, RouteOptimized))
        assert json.loads(event.waypoint_order) == [str(w.id) for w in route.ordered_waypoints()]

    def test_cancelled_route_cannot_be_optimized(self, route):
        route.cancel("Not needed")
        with pytest.raises(InvalidTransition):
            route.optimize()
