"""Typed error taxonomy shared by the dispatch and inventory contexts.

The errors extend Protean's own exceptions so that handlers, the unit of work
and the FastAPI exception handlers treat them the same way as the errors
Protean raises itself:

    ValidationError        malformed or out-of-range input (Protean's own)
    InvalidTransition      illegal state-machine edge
    CapacityExceeded       cargo does not fit the vehicle
    VehicleUnavailable     vehicle is not in the ``available`` state
    InsufficientStock      stock change would break available >= 0
    NotFound               lookup by a non-identity key found nothing
    Conflict               serialization point could not be acquired
    Unavailable            collaborator or storage failure

``Conflict`` and ``Unavailable`` are safe to retry; every other error needs
the caller to correct the request.
"""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError


class InvalidTransition(ValidationError):
    """The requested status change is not an edge of the state machine."""

    retryable = False


class CapacityExceeded(ValidationError):
    """Order cargo is heavier than the vehicle can carry."""

    retryable = False


class VehicleUnavailable(ValidationError):
    """The vehicle is already held by another order or out of service."""

    retryable = False


class InsufficientStock(ValidationError):
    """The stock change would drive available or current stock below zero."""

    retryable = False


class NotFound(ObjectNotFoundError):
    retryable = False


class Conflict(InvalidOperationError):
    """Concurrent modification detected; the request can be retried as-is."""

    retryable = True


class Unavailable(InvalidOperationError):
    """An external collaborator or the storage layer failed; retry later."""

    retryable = True


def is_retryable(exc: Exception) -> bool:
    return getattr(exc, "retryable", False)
