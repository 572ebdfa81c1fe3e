"""
Centralized error reporting for the API.

Client errors are answered with 400 and their detail. Upstream pin failures
and anything unexpected are logged here and collapsed into one generic 500
so that provider details never reach the caller.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from .intake import PayloadValidationError, MissingFileError
from src.pinning.providers.base import PinError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something broke!"


async def payload_validation_handler(request: Request, exc: PayloadValidationError):
    return JSONResponse(
        status_code=400,
        content={"errors": [error.model_dump() for error in exc.errors]},
    )


async def missing_file_handler(request: Request, exc: MissingFileError):
    return PlainTextResponse(exc.message, status_code=400)


async def pin_error_handler(request: Request, exc: PinError):
    logger.error(
        f"Upstream pin failed on {request.method} {request.url.path}: "
        f"{type(exc).__name__}: {exc}"
    )
    return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)


async def catch_unhandled_errors(request: Request, call_next):
    """Catch-all 500. Registered innermost so CORS and security headers still apply."""
    try:
        return await call_next(request)
    except Exception as exc:
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}",
            exc_info=exc,
        )
        return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PayloadValidationError, payload_validation_handler)
    app.add_exception_handler(MissingFileError, missing_file_handler)
    app.add_exception_handler(PinError, pin_error_handler)
