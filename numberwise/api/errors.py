"""
API Error Handlers

Turns store failures, missing clients and unmatched routes into JSON
responses. Store error text stays in the server log; callers only get an
error code and an id to correlate with the log entry.
"""

import logging
import uuid

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..status import ClientNotFoundError

logger = logging.getLogger(__name__)


def log_error(request: Request, exc: Exception, code: str) -> str:
    """Log an exception with a fresh correlation id.

    Returns:
        The error id to hand back to the caller
    """
    error_id = uuid.uuid4().hex
    logger.error(
        f"[{error_id}] {code} on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return error_id


async def client_not_found_handler(request: Request, exc: ClientNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "Client not found",
            "message": f"No client exists with id {exc.client_id}",
        },
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    error_id = log_error(request, exc, "database_error")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "database_error", "errorId": error_id},
    )


async def route_not_found_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown paths and unsupported methods both answer 404."""
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": "Not Found",
                "message": f"Route {request.method} {request.url.path} not found",
            },
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error_id = log_error(request, exc, "internal_error")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "internal_error", "errorId": error_id},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to an application."""
    app.add_exception_handler(ClientNotFoundError, client_not_found_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(StarletteHTTPException, route_not_found_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
