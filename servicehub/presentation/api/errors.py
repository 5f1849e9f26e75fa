"""Translation of domain and validation errors into HTTP responses."""

import logging
from typing import Any, Dict, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ...domain.exceptions import AccountError

logger = logging.getLogger(__name__)

# Location prefixes FastAPI adds in front of the offending field name.
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """Join every field error into ``"field: reason, field: reason"``."""
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if str(part) not in _LOCATION_ROOTS]
        field = ".".join(loc) or "request"
        messages.append(f"{field}: {error.get('msg', 'invalid value')}")
    return ", ".join(messages)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AccountError)
    async def handle_account_error(request: Request, exc: AccountError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": format_validation_errors(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc)},
        )
