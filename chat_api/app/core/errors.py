"""
Error types shared by services and endpoints.

Services never raise across their boundary: they return either the
value or an ``ErrorResult`` carrying a message.  Endpoints turn those
results (and malformed requests) into ``ApiError`` subclasses which a
single exception handler renders as plain‑text responses.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel


logger = logging.getLogger(__name__)


class ErrorResult(BaseModel):
    """Tagged error returned by service methods in place of a value."""

    error: str


class ApiError(Exception):
    """Base error rendered as ``PlainTextResponse(message, status_code)``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(ApiError):
    """Missing or malformed fields; raised before any persistence call."""

    status_code = status.HTTP_400_BAD_REQUEST


class PersistenceError(ApiError):
    """A service returned an ``ErrorResult`` (including "not found")."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def api_error_handler(request: Request, exc: ApiError) -> PlainTextResponse:
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
