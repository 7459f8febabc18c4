"""
API Error Handling

FastAPI-specific error handling and response schemas.
"""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from src.core.exceptions import ApplicationException

from .exception_handlers import build_error_response, global_exception_handler


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers for the FastAPI application.

    ApplicationException gets its own entry so it is answered by the
    exception middleware instead of the server-error fallback.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(ApplicationException, global_exception_handler)
    app.add_exception_handler(HTTPException, global_exception_handler)
    app.add_exception_handler(RequestValidationError, global_exception_handler)


__all__ = [
    "build_error_response",
    "global_exception_handler",
    "register_exception_handlers",
]
