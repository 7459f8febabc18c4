"""
Exception Handlers

Dedicated module for FastAPI-bound exception handling.
"""

import traceback
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from src.api.schemas.error import ErrorResponse
from src.core.config import settings
from src.core.error_codes import APIErrorCode, ValidationErrorCode
from src.core.exceptions import ApplicationException
from src.core.logger import get_logger

logger = get_logger(__name__)


def _log_exception(request: Request, exc: Exception, status_code: int) -> None:
    """Log exception with appropriate level based on status code."""
    msg = "Request failed in %s %s: %s"
    args = (request.method, request.url.path, str(exc))

    if status_code >= 500:
        logger.error(msg, *args, exc_info=True)
    elif status_code >= 400:
        logger.warning(msg, *args)
    else:
        logger.info(msg, *args)


def build_error_response(
    request: Request,
    status_code: int,
    *,
    message: str,
    error_type: str,
    code: Optional[str],
    details: Optional[Dict[str, Any]] = None,
    debug: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Build the standardized error response."""
    request_id = getattr(request.state, "request_id", None)

    payload = ErrorResponse(
        error=message,
        type=error_type,
        code=code,
        details=details,
        debug=debug,
        request_id=request_id,
        path=request.url.path,
        method=request.method,
    )

    headers = {}
    if request_id:
        headers["X-Request-ID"] = request_id

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(payload.model_dump()),
        headers=headers,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for all unhandled exceptions.

    Application exceptions map to the status of their error code; storage
    failures keep the datastore's own message.
    """
    if isinstance(exc, ApplicationException):
        status_code = exc.http_status
        _log_exception(request, exc, status_code)

        exc_dict = exc.to_dict()
        return build_error_response(
            request,
            status_code,
            message=exc_dict["message"],
            error_type=exc.__class__.__name__,
            code=exc_dict["code"],
            details=exc_dict["details"] or None,
        )

    if isinstance(exc, HTTPException):
        _log_exception(request, exc, exc.status_code)
        return build_error_response(
            request,
            exc.status_code,
            message=str(exc.detail),
            error_type="HTTPException",
            code=f"HTTP_{exc.status_code}",
        )

    if isinstance(exc, RequestValidationError):
        _log_exception(request, exc, 422)
        return build_error_response(
            request,
            422,
            message="Request validation failed",
            error_type="ValidationError",
            code=ValidationErrorCode.INVALID_INPUT.value,
            details={
                "validation_errors": [
                    {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                    for err in exc.errors()
                ]
            },
        )

    _log_exception(request, exc, 500)
    debug = None
    if settings.debug:
        debug = {
            "exception_type": exc.__class__.__name__,
            "exception_message": str(exc),
            "traceback": traceback.format_exc(),
        }
    return build_error_response(
        request,
        500,
        message="An unexpected error occurred",
        error_type="InternalServerError",
        code=APIErrorCode.INTERNAL_ERROR.value,
        debug=debug,
    )
