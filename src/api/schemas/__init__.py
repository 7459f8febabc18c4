"""
API Schemas

Pydantic models for API responses.
"""

from .error import ErrorResponse
from .responses import HealthResponse, SuccessResponse

__all__ = ["ErrorResponse", "HealthResponse", "SuccessResponse"]
