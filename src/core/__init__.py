"""
Core Package

Core configuration, error handling, and logging for hotel-api.
"""

# ruff: noqa: F401  # All imports are re-exported via __all__

from .config import Settings, settings  # noqa: F401
from .error_codes import (  # noqa: F401
    ERROR_CODE_MAP,
    APIErrorCode,
    ConfigurationErrorCode,
    DatabaseErrorCode,
    ResourceErrorCode,
    ValidationErrorCode,
    get_http_status_code,
)
from .exceptions import (  # noqa: F401
    ApplicationException,
    ConfigurationException,
    DatabaseException,
    ResourceNotFoundException,
    UnsupportedOperationException,
    ValidationException,
)
from .logger import get_logger  # noqa: F401

__all__ = [
    # Configuration
    "Settings",
    "settings",
    # Error handling
    "ConfigurationErrorCode",
    "DatabaseErrorCode",
    "APIErrorCode",
    "ValidationErrorCode",
    "ResourceErrorCode",
    "ERROR_CODE_MAP",
    "get_http_status_code",
    # Exceptions
    "ApplicationException",
    "ConfigurationException",
    "DatabaseException",
    "ValidationException",
    "ResourceNotFoundException",
    "UnsupportedOperationException",
    # Logging
    "get_logger",
]
