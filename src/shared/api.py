"""HTTP mapping for the typed error taxonomy.

Builds on Protean's FastAPI exception handlers and adds status codes for the
errors in ``shared.errors``. Starlette resolves handlers along the exception's
MRO, so the subclasses registered here win over Protean's base handlers.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers

from shared.errors import (
    CapacityExceeded,
    Conflict,
    InsufficientStock,
    InvalidTransition,
    NotFound,
    Unavailable,
    VehicleUnavailable,
)

_VALIDATION_STYLE = {
    InvalidTransition: 409,
    VehicleUnavailable: 409,
    CapacityExceeded: 422,
    InsufficientStock: 422,
}

_MESSAGE_STYLE = {
    Conflict: 409,
    Unavailable: 503,
}


def _error_body(exc: Exception) -> dict:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        errors = messages
    else:
        errors = {"_entity": [str(messages or exc)]}
    return {
        "error": exc.__class__.__name__,
        "errors": errors,
        "retryable": getattr(exc, "retryable", False),
    }


def _handler_for(status_code: int):
    async def handler(_request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=_error_body(exc))

    return handler


def register_error_handlers(app: FastAPI) -> None:
    """Register Protean's handlers plus the dispatch error taxonomy on ``app``."""
    register_exception_handlers(app)
    for exc_cls, status_code in {**_VALIDATION_STYLE, **_MESSAGE_STYLE}.items():
        app.add_exception_handler(exc_cls, _handler_for(status_code))
    for exc_cls in (ObjectNotFoundError, NotFound):
        app.add_exception_handler(exc_cls, _handler_for(404))
