"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
(coordinates in range, contact name and phone on every stop, positive
capacities) and match the field names expected by the API's Pydantic
request schemas.
"""

import random
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

fake = Faker()

# Keep generated stops inside one metro area so routes stay plausible
_CENTER_LAT, _CENTER_LNG = 40.7128, -74.0060

# ---------- Orders ----------


def coordinates(spread: float = 0.2) -> tuple[float, float]:
    """Random point within ``spread`` degrees of the city centre."""
    return (
        round(_CENTER_LAT + random.uniform(-spread, spread), 6),
        round(_CENTER_LNG + random.uniform(-spread, spread), 6),
    )


def valid_phone() -> str:
    area = random.randint(200, 999)
    prefix = random.randint(200, 999)
    line = random.randint(1000, 9999)
    return f"+1-{area}-{prefix}-{line}"


def stop_data() -> dict:
    """Generate StopSchema payload for a pickup or delivery stop."""
    lat, lng = coordinates()
    return {
        "name": fake.company()[:100],
        "address": fake.street_address()[:255],
        "latitude": lat,
        "longitude": lng,
        "contact_name": fake.name()[:100],
        "contact_phone": valid_phone(),
        "contact_email": fake.email(),
    }


def cargo_line(max_weight: float = 40.0) -> dict:
    return {
        "name": f"{fake.word().capitalize()} {fake.word().capitalize()}"[:100],
        "sku": valid_sku("CRG"),
        "quantity": random.randint(1, 4),
        "weight": round(random.uniform(0.5, max_weight), 2),
        "volume": round(random.uniform(0.01, 0.5), 3),
        "value": round(random.uniform(5.0, 250.0), 2),
        "fragile": random.random() < 0.1,
    }


def order_data(customer_id: str | None = None, num_lines: int = 2, max_weight: float = 40.0) -> dict:
    """Generate CreateOrderRequest payload."""
    base = round(random.uniform(20.0, 150.0), 2)
    return {
        "customer_id": customer_id or f"cust-{uuid.uuid4().hex[:8]}",
        "order_type": random.choice(["delivery", "express", "scheduled"]),
        "priority": random.choice(["low", "medium", "medium", "high", "urgent"]),
        "pickup": stop_data(),
        "delivery": stop_data(),
        "cargo": [cargo_line(max_weight) for _ in range(num_lines)],
        "pricing": {
            "base_price": base,
            "additional_charges": round(random.uniform(0, 15.0), 2),
            "discounts": 0.0,
            "taxes": round(base * 0.15, 2),
            "currency": "USD",
        },
        "transit_minutes": random.choice([None, 60, 120, 240]),
        "created_by": "loadtest",
    }


# ---------- Routes ----------


def waypoint_data(sequence: int | None = None, waypoint_type: str | None = None) -> dict:
    """Generate WaypointSchema payload."""
    lat, lng = coordinates()
    return {
        "sequence": sequence,
        "name": fake.street_name()[:100],
        "address": fake.street_address()[:255],
        "latitude": lat,
        "longitude": lng,
        "waypoint_type": waypoint_type or random.choice(["pickup", "delivery", "waypoint"]),
        "contact_name": fake.name()[:100],
        "contact_phone": valid_phone(),
    }


def route_data(num_waypoints: int = 4) -> dict:
    """Generate CreateRouteRequest payload planned to start within the hour."""
    start = datetime.now(UTC) + timedelta(minutes=random.randint(5, 60))
    return {
        "name": f"{fake.city()} run {uuid.uuid4().hex[:4]}"[:100],
        "description": fake.sentence()[:255],
        "created_by": "loadtest",
        "priority": random.choice(["low", "medium", "high"]),
        "planned_start": start.isoformat(),
        "planned_end": (start + timedelta(hours=random.randint(2, 6))).isoformat(),
        "waypoints": [waypoint_data(sequence=i + 1) for i in range(num_waypoints)],
    }


def location_update() -> dict:
    lat, lng = coordinates(spread=0.3)
    return {"latitude": lat, "longitude": lng, "address": fake.street_address()[:255]}


# ---------- Vehicles ----------


def registration_number() -> str:
    """Registration like 'LT-4F2A91' (unique, max 20 chars)."""
    return f"LT-{uuid.uuid4().hex[:6].upper()}"


def vehicle_data(capacity_weight: float | None = None) -> dict:
    """Generate RegisterVehicleRequest payload."""
    vehicle_type = random.choice(["van", "van", "truck", "car"])
    default_capacity = {"truck": 8000.0, "van": 1000.0, "car": 300.0}[vehicle_type]
    return {
        "registration_number": registration_number(),
        "vehicle_type": vehicle_type,
        "capacity_weight": capacity_weight or default_capacity,
        "capacity_volume": round(random.uniform(2.0, 30.0), 1),
    }


# ---------- Inventory ----------


def valid_sku(prefix: str = "LT") -> str:
    suffix = uuid.uuid4().hex[:8].upper()
    return f"{prefix}-{suffix}"


def register_item_data(opening_quantity: int | None = None, reorder_point: int = 10) -> dict:
    """Generate RegisterItemRequest payload."""
    return {
        "sku": valid_sku("INV"),
        "name": f"{fake.word().capitalize()} {fake.word().capitalize()}"[:100],
        "description": fake.sentence()[:255],
        "category": random.choice(["parts", "packaging", "consumables", "equipment"]),
        "unit": random.choice(["each", "box", "kg"]),
        "location": f"A{random.randint(1, 20)}-{random.randint(1, 9)}",
        "opening_quantity": opening_quantity if opening_quantity is not None else random.randint(10, 500),
        "reorder_point": reorder_point,
        "maximum": 1000,
    }


def movement_data(movement_type: str, quantity: int) -> dict:
    """Generate AddMovementRequest payload."""
    return {
        "movement_type": movement_type,
        "quantity": quantity,
        "reason": fake.sentence(nb_words=4)[:100],
        "actor": "loadtest",
        "reference": f"REF-{uuid.uuid4().hex[:6].upper()}",
    }
