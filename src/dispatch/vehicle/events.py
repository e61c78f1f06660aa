"""Vehicle domain events."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from dispatch.domain import dispatch


@dispatch.event(part_of="Vehicle")
class VehicleRegistered:
    __version__ = "v1"

    vehicle_id = Identifier(required=True)
    registration_number = String(required=True)
    vehicle_type = String()
    capacity_weight = Float(required=True)
    capacity_volume = Float()
    registered_at = DateTime(required=True)


@dispatch.event(part_of="Vehicle")
class VehicleStatusChanged:
    """The vehicle's availability changed."""

    __version__ = "v1"

    vehicle_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    driver_id = Identifier()
    order_id = Identifier()
    route_id = Identifier()
    reason = String()
    changed_at = DateTime(required=True)


@dispatch.event(part_of="Vehicle")
class VehicleTripRecorded:
    """A completed route was folded into the vehicle's running metrics."""

    __version__ = "v1"

    vehicle_id = Identifier(required=True)
    route_id = Identifier(required=True)
    distance = Float(required=True)
    fuel_consumed = Float(required=True)
    total_trips = Integer(required=True)
    recorded_at = DateTime(required=True)
