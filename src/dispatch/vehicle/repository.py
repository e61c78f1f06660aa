"""Repository for the Vehicle aggregate."""

from dispatch.domain import dispatch

from .vehicle import Vehicle


@dispatch.repository(part_of=Vehicle)
class VehicleRepository:
    def find_by_registration(self, registration_number: str) -> Vehicle | None:
        """Find a vehicle by its (normalized, upper-case) registration."""
        return self._dao.query.filter(registration_number=registration_number).all().first
