"""
API Error Response Schemas

Pydantic model for the error body every failing request returns.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response format; ``error`` carries the message."""

    model_config = ConfigDict(
        extra="forbid",  # Prevent unexpected fields from being added
        json_schema_extra={
            "examples": [
                {
                    "error": "Failed to create record in rooms: UNIQUE constraint failed: rooms.id",
                    "type": "DatabaseException",
                    "code": "DATABASE_QUERY_FAILED",
                    "details": {"resource": "rooms"},
                    "request_id": "3f1c2a4e-9b7d-4c1e-8a55-0d6f2b9e1c77",
                    "path": "/api/rooms",
                    "method": "POST",
                }
            ]
        },
    )

    error: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Exception type", examples=["ValidationException"])
    code: Optional[str] = Field(
        None,
        description="Machine-readable error code",
        examples=["VALIDATION_UNKNOWN_FIELD"],
    )
    details: Optional[Dict[str, Any]] = Field(
        None, description="Additional error details"
    )
    debug: Optional[Dict[str, Any]] = Field(
        None, description="Debug information (only in debug mode)"
    )
    request_id: Optional[str] = Field(None, description="Request ID for tracing")
    path: Optional[str] = Field(None, description="Request path", examples=["/api/rooms"])
    method: Optional[str] = Field(None, description="HTTP method", examples=["POST"])
