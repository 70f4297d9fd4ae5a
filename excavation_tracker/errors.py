"""Domain exceptions and FastAPI error handler registration."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# --- Exceptions ---

class ValidationError(Exception):
    """Request data failed validation. Carries per-field messages."""

    def __init__(self, errors, message=None):
        super().__init__(message or "Invalid request data")
        self.message = message
        self.errors = errors


class NotFoundError(Exception):
    """An id-addressed job or estimate does not exist."""


class PersistenceError(Exception):
    """The backing store failed. Detail is logged, never returned."""


# --- Error → HTTP mapping ---

def _entity_label(request: Request) -> str:
    return "estimate" if "/estimates" in request.url.path else "job"


def _field_errors(raw_errors):
    """Flatten pydantic error dicts into [{field, message}]."""
    fields = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append({
            "field": ".".join(loc) or None,
            "message": err.get("msg", "Invalid value"),
        })
    return fields


def _bad_request(request: Request, errors, message=None) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "message": message or f"Invalid {_entity_label(request)} data",
            "errors": errors,
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers so every failure has a JSON body."""

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _bad_request(request, _field_errors(exc.errors()))

    @app.exception_handler(ValidationError)
    async def _validation(request: Request, exc: ValidationError) -> JSONResponse:
        return _bad_request(request, exc.errors, exc.message)

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"message": str(exc)})

    @app.exception_handler(PersistenceError)
    async def _persistence(request: Request, exc: PersistenceError) -> JSONResponse:
        # storage already logged the underlying database error
        logger.error("Persistence failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})
