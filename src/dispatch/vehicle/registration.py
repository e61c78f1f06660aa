"""Vehicle registration and operator status changes — commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from dispatch.domain import dispatch
from dispatch.vehicle.vehicle import Vehicle, VehicleType


@dispatch.command(part_of="Vehicle")
class RegisterVehicle:
    registration_number = String(required=True, max_length=20)
    vehicle_type = String(choices=VehicleType, default=VehicleType.VAN.value)
    capacity_weight = Float(required=True)
    capacity_volume = Float()


@dispatch.command(part_of="Vehicle")
class ChangeVehicleStatus:
    """Operator status change, e.g. sending an idle vehicle to maintenance."""

    vehicle_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    reason = String(max_length=500)


@dispatch.command_handler(part_of=Vehicle)
class VehicleCommandHandler:
    @handle(RegisterVehicle)
    def register_vehicle(self, command):
        repo = current_domain.repository_for(Vehicle)
        registration = command.registration_number.strip().upper()
        if repo.find_by_registration(registration) is not None:
            raise ValidationError({"registration_number": [f"Vehicle {registration} is already registered"]})

        vehicle = Vehicle.register(
            registration_number=registration,
            capacity_weight=command.capacity_weight,
            capacity_volume=command.capacity_volume,
            vehicle_type=command.vehicle_type,
        )
        repo.add(vehicle)
        return str(vehicle.id)

    @handle(ChangeVehicleStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Vehicle)
        vehicle = repo.get(command.vehicle_id)
        vehicle.change_status(command.status, reason=command.reason)
        repo.add(vehicle)
