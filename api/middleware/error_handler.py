"""
Global Error Handler Middleware
================================

Maps custom exceptions to HTTP status codes and formats error responses.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from api.models.user import FIELD_MESSAGES
from exceptions import (
    AccountServiceError,
    AccountExistsError,
    InvalidCredentialsError,
    AuthenticationRequiredError,
    InvalidTokenError,
    AccountNotFoundError,
    DatabaseUnavailableError,
    ConfigurationError,
)


logger = logging.getLogger(__name__)


# Map exceptions to HTTP status codes
EXCEPTION_STATUS_MAP = {
    AccountExistsError: status.HTTP_400_BAD_REQUEST,
    InvalidCredentialsError: status.HTTP_400_BAD_REQUEST,
    AuthenticationRequiredError: status.HTTP_401_UNAUTHORIZED,
    InvalidTokenError: status.HTTP_401_UNAUTHORIZED,
    AccountNotFoundError: status.HTTP_404_NOT_FOUND,
    DatabaseUnavailableError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def error_handler_middleware(request: Request, call_next):
    """
    Global error handling middleware.

    Account errors become `{"errors": [{"msg": ...}]}` with the mapped
    status code. Anything else is logged with its traceback and returned
    as a plain-text 500 carrying the exception message.

    Args:
        request: The incoming request
        call_next: The next middleware/route handler

    Returns:
        Response, JSONResponse or PlainTextResponse
    """
    try:
        response = await call_next(request)
        return response
    except AccountServiceError as e:
        status_code = EXCEPTION_STATUS_MAP.get(
            type(e),
            status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {e.message}")
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(
            status_code=status_code,
            content={"errors": [e.to_dict()]},
            headers=headers
        )
    except Exception as e:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return PlainTextResponse(
            str(e) or "Server Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Render request validation failures as 400 `{"errors": [...]}`.

    One entry per offending field, using the client-facing message for
    known fields and pydantic's own message otherwise.
    """
    errors = []
    seen = set()
    for error in exc.errors():
        loc = error.get("loc", ())
        location = str(loc[0]) if loc else "body"
        param = loc[-1] if len(loc) > 1 and isinstance(loc[-1], str) else location
        if param in seen:
            continue
        seen.add(param)
        errors.append({
            "msg": FIELD_MESSAGES.get(param, error.get("msg", "Invalid value")),
            "param": param,
            "location": location,
        })

    logger.debug(f"Validation failed on {request.url.path}: {[e['param'] for e in errors]}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": errors}
    )
