"""User directory port — the identity service seen from dispatch.

Dispatch only needs to know whether a user exists and which role they hold,
to check that an order is handed to an actual driver.
"""

from abc import ABC, abstractmethod
from enum import Enum


class Role(Enum):
    ADMIN = "admin"
    DRIVER = "driver"
    FLEET_MANAGER = "fleet-manager"
    PRODUCER = "producer"
    WHOLESALER = "wholesaler"
    RETAILER = "retailer"


class UserDirectoryPort(ABC):
    """Abstract interface for user directory adapters."""

    @abstractmethod
    def get_user(self, user_id: str) -> dict | None:
        """Look up a user.

        Returns:
            dict with keys: id, role; or None when no such user exists

        Raises:
            Unavailable: when the directory cannot be reached
        """
        ...
