"""
Inkpost Backend — Shared Schemas
==================================

What:  Base model with camelCase wire names, plus the error, message and
       health response models shared by every route module.
How:   Fields are declared in snake_case; `to_camel` generates the JSON
       aliases (`author_id` ↔ `authorId`). Both spellings are accepted on input.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every API schema; reads ORM objects via `from_attributes`."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class MessageResponse(CamelModel):
    """Returned by delete endpoints."""
    message: str = Field(description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Post with ID '...' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(CamelModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
