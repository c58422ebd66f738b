"""Translate core errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from equipment_service.core.errors import (
    Conflict,
    EquipmentServiceError,
    InvalidArgument,
    NotFound,
    ServiceNotReady,
    StoreUnavailable,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[EquipmentServiceError], int], ...] = (
    (NotFound, 404),
    (Conflict, 409),
    (InvalidArgument, 400),
    (StoreUnavailable, 503),
    (ServiceNotReady, 503),
)


def _status_for(exc: EquipmentServiceError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def service_error_handler(request: Request, exc: EquipmentServiceError) -> JSONResponse:
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"Retry-After": "5"} if exc.retryable else None
    return JSONResponse(
        status_code=status_code,
        content={"message": exc.message, "details": exc.details},
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()]
    return JSONResponse(status_code=400, content={"message": "Request is invalid", "details": details})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EquipmentServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)


__all__ = ["register_exception_handlers"]
