# ============================================================================
# API ERROR HANDLERS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Exception -> HTTP response mapping
# PURPOSE: One place that turns AppErrors into JSON error bodies
# CREATED: 12 OCT 2026
# ============================================================================
"""
API Error Handlers

Response body for every handled error:

    {"status": "fail" | "error", "code": "...", "message": "...", "time": "..."}

Operational AppErrors are reported with their own status code and message.
Non-operational errors (InternalError, unexpected exceptions) are logged
with traceback and reported as a generic 500; with APP_ENV=dev the detail
is included.

Usage:
    from api.errors import install_error_handlers

    install_error_handlers(app)
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.config import get_defaults
from core.errors import AppError, ValidationFailureError

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Something went wrong"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _body(error: AppError) -> Dict[str, Any]:
    body = error.to_dict()
    body["time"] = _now()
    return body


def _internal_response(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    body: Dict[str, Any] = {
        "status": "error",
        "code": "error.internal",
        "message": GENERIC_MESSAGE,
        "time": _now(),
    }
    if get_defaults().api.is_dev:
        body["detail"] = str(exc)
        body["type"] = type(exc).__name__
    return JSONResponse(status_code=500, content=body)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if not exc.is_operational:
        return _internal_response(request, exc)
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
    return JSONResponse(status_code=exc.status_code, content=_body(exc))


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    error = ValidationFailureError("; ".join(parts) or "Invalid request")
    return JSONResponse(status_code=error.status_code, content=_body(error))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return _internal_response(request, exc)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = ["install_error_handlers", "GENERIC_MESSAGE"]
