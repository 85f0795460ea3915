"""
Exception handlers - map domain and unexpected errors to HTTP responses.

Internal detail is logged, never returned to the client.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.domain.exceptions import PersistenceError

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred"


async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc)},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": UNEXPECTED_ERROR},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PersistenceError, persistence_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
