"""Waypoint ordering heuristic and distance estimates.

The ordering is deliberately simple: pickups, then deliveries, then every
other stop, each group keeping its existing relative order. Distances are
great-circle distances between consecutive stops, not road distances.
"""

import math

from dispatch import config

EARTH_RADIUS_KM = 6371.0

PICKUP = "pickup"
DELIVERY = "delivery"


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two coordinates in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def order_waypoints(waypoints: list) -> list:
    """Pickups, deliveries, then the rest; stable within each group.

    ``waypoints`` must already be in their current sequence order.
    """
    pickups = [w for w in waypoints if w.waypoint_type == PICKUP]
    deliveries = [w for w in waypoints if w.waypoint_type == DELIVERY]
    others = [w for w in waypoints if w.waypoint_type not in (PICKUP, DELIVERY)]
    return pickups + deliveries + others


def path_distance(points: list[tuple[float, float]]) -> float:
    return sum(haversine_km(*a, *b) for a, b in zip(points, points[1:]))


def estimate(distance_km: float) -> dict:
    """Duration in minutes and fuel cost for a distance at the configured rates."""
    return {
        "total_distance": distance_km,
        "estimated_duration": distance_km / config.AVERAGE_SPEED_KMH * 60,
        "estimated_fuel_cost": distance_km / config.FUEL_EFFICIENCY_KM_PER_L * config.FUEL_PRICE_PER_L,
    }


def fuel_for(distance_km: float) -> float:
    return distance_km / config.FUEL_EFFICIENCY_KM_PER_L
