"""
Error Codes

Standardized error codes for hotel-api.
"""

from enum import StrEnum
from types import MappingProxyType
from typing import Mapping


class ErrorCode(StrEnum):
    """Base error code enum (string-based)."""


class ConfigurationErrorCode(ErrorCode):
    """Configuration-related error codes."""

    INVALID_CONFIG = "CONFIGURATION_INVALID_CONFIG"
    MISSING_CONFIG = "CONFIGURATION_MISSING_CONFIG"


class DatabaseErrorCode(ErrorCode):
    """Database-related error codes."""

    CONNECTION_FAILED = "DATABASE_CONNECTION_FAILED"
    QUERY_FAILED = "DATABASE_QUERY_FAILED"
    TRANSACTION_FAILED = "DATABASE_TRANSACTION_FAILED"
    PROVISIONING_FAILED = "DATABASE_PROVISIONING_FAILED"
    CORRUPT_DOCUMENT = "DATABASE_CORRUPT_DOCUMENT"


class APIErrorCode(ErrorCode):
    """API-related error codes."""

    INVALID_REQUEST = "API_INVALID_REQUEST"
    NOT_FOUND = "API_NOT_FOUND"
    METHOD_NOT_ALLOWED = "API_METHOD_NOT_ALLOWED"
    PAYLOAD_TOO_LARGE = "API_PAYLOAD_TOO_LARGE"
    INTERNAL_ERROR = "API_INTERNAL_ERROR"


class ValidationErrorCode(ErrorCode):
    """Validation-related error codes."""

    INVALID_INPUT = "VALIDATION_INVALID_INPUT"
    MISSING_FIELD = "VALIDATION_MISSING_FIELD"
    UNKNOWN_FIELD = "VALIDATION_UNKNOWN_FIELD"
    IMMUTABLE_FIELD = "VALIDATION_IMMUTABLE_FIELD"


class ResourceErrorCode(ErrorCode):
    """Resource registry error codes."""

    UNKNOWN_RESOURCE = "RESOURCE_UNKNOWN"
    UNSUPPORTED_OPERATION = "RESOURCE_UNSUPPORTED_OPERATION"


# Error code to HTTP status mapping
#
# Error code values carry a domain prefix (DATABASE_*, API_*, VALIDATION_*,
# RESOURCE_*) so they stay unique in responses and logs. Every new code needs
# an entry here; unmapped codes fall back to 500.
ERROR_CODE_MAP: Mapping[ErrorCode, int] = MappingProxyType(
    {
        # Configuration errors
        ConfigurationErrorCode.INVALID_CONFIG: 500,
        ConfigurationErrorCode.MISSING_CONFIG: 500,
        # Database errors
        DatabaseErrorCode.CONNECTION_FAILED: 503,
        DatabaseErrorCode.QUERY_FAILED: 500,
        DatabaseErrorCode.TRANSACTION_FAILED: 500,
        DatabaseErrorCode.PROVISIONING_FAILED: 500,
        DatabaseErrorCode.CORRUPT_DOCUMENT: 500,
        # API errors
        APIErrorCode.INVALID_REQUEST: 400,
        APIErrorCode.NOT_FOUND: 404,
        APIErrorCode.METHOD_NOT_ALLOWED: 405,
        APIErrorCode.PAYLOAD_TOO_LARGE: 413,
        APIErrorCode.INTERNAL_ERROR: 500,
        # Validation errors
        ValidationErrorCode.INVALID_INPUT: 400,
        ValidationErrorCode.MISSING_FIELD: 400,
        ValidationErrorCode.UNKNOWN_FIELD: 400,
        ValidationErrorCode.IMMUTABLE_FIELD: 400,
        # Resource errors
        ResourceErrorCode.UNKNOWN_RESOURCE: 404,
        ResourceErrorCode.UNSUPPORTED_OPERATION: 405,
    }
)


def _get_status_for_string(error_code_str: str) -> int:
    """Helper function to get status code for string error code."""
    for code in ERROR_CODE_MAP:
        if code.value == error_code_str:
            return ERROR_CODE_MAP[code]
    return 500


def get_http_status_code(error_code: ErrorCode | str) -> int:
    """
    Get HTTP status code for an error code.

    Args:
        error_code: Error code enum or string

    Returns:
        HTTP status code (defaults to 500 if not found)
    """
    if isinstance(error_code, ErrorCode):
        return ERROR_CODE_MAP.get(error_code, 500)
    return _get_status_for_string(error_code)
