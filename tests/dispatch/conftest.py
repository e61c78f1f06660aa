from datetime import UTC, datetime, timedelta

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def dispatch_bed():
    from dispatch.domain import dispatch

    bed = DomainFixture(dispatch)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(dispatch_bed):
    with dispatch_bed.domain_context():
        yield


def _stop(name="Warehouse A", hours=0, **overrides):
    start = datetime(2026, 10, 19, 9, 0, tzinfo=UTC) + timedelta(hours=hours)
    data = {
        "name": name,
        "address": f"{name}, 1 Dock Road",
        "latitude": -1.2921,
        "longitude": 36.8219,
        "contact_name": "Amina",
        "contact_phone": "+254700000001",
        "window_start": start,
        "window_end": start + timedelta(hours=2),
    }
    data.update(overrides)
    return data


def _order_data(weight=100.0, total_amount=115.0, **overrides):
    data = {
        "customer_id": "cust-001",
        "pickup": _stop("Warehouse A"),
        "delivery": _stop("Shop B", hours=4, latitude=-1.3000, longitude=36.8000),
        "cargo": [{"name": "Maize flour", "quantity": 1, "weight": weight, "value": 50.0}],
        "pricing": {"base_price": 100.0, "taxes": 15.0, "total_amount": total_amount},
        "created_by": "dispatcher-1",
    }
    data.update(overrides)
    return data


def _route_data(waypoints=None, **overrides):
    data = {
        "name": "Nairobi morning run",
        "created_by": "fleet-manager-1",
        "planned_start": datetime(2026, 10, 19, 10, 0, tzinfo=UTC),
        "planned_end": datetime(2026, 10, 19, 12, 0, tzinfo=UTC),
        "waypoints": waypoints
        if waypoints is not None
        else [
            {"latitude": -1.2921, "longitude": 36.8219, "waypoint_type": "pickup", "name": "Depot"},
            {"latitude": -1.3000, "longitude": 36.8000, "waypoint_type": "delivery", "name": "Shop B"},
        ],
    }
    data.update(overrides)
    return data


@pytest.fixture()
def driver_id(directory):
    directory.add_user("drv-001", role="driver", name="Juma")
    return "drv-001"


@pytest.fixture()
def new_vehicle():
    from dispatch import operations

    def _new_vehicle(registration="KDA 001A", capacity_weight=1000.0):
        return operations.register_vehicle(registration, capacity_weight)

    return _new_vehicle


@pytest.fixture()
def new_order():
    from dispatch import operations

    def _new_order(**overrides):
        return operations.create_order(_order_data(**overrides))

    return _new_order


@pytest.fixture()
def planned_route():
    from dispatch import operations

    def _planned_route(**overrides):
        route_id = operations.create_route(_route_data(**overrides))
        operations.plan_route(route_id)
        return route_id

    return _planned_route


@pytest.fixture()
def make_stop():
    return _stop


@pytest.fixture()
def make_order_data():
    return _order_data


@pytest.fixture()
def make_route_data():
    return _route_data
