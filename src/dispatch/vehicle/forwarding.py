"""Outbound event handler — forwards vehicle availability changes to the event sink."""

from protean.utils.mixins import handle
from shared.sink.forwarding import forward

from dispatch.domain import dispatch
from dispatch.vehicle.events import VehicleStatusChanged, VehicleTripRecorded
from dispatch.vehicle.vehicle import Vehicle


@dispatch.event_handler(part_of=Vehicle)
class VehicleEventForwarder:
    @handle(VehicleStatusChanged)
    def on_status_changed(self, event: VehicleStatusChanged) -> None:
        forward(event, "Vehicle", event.vehicle_id)

    @handle(VehicleTripRecorded)
    def on_trip_recorded(self, event: VehicleTripRecorded) -> None:
        forward(event, "Vehicle", event.vehicle_id)
