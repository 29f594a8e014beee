"""
Duet Backend — Shared Schemas
===============================

What:  Base model, success envelope and error/health bodies used by every
       route module.
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """snake_case attributes, camelCase JSON, readable from ORM rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(CamelModel, Generic[T]):
    """
    Success wrapper for every `/api` response.

        {"success": true, "data": {...}}

    Errors never use the envelope; they use `ErrorResponse`.
    """

    success: bool = True
    data: T


class DeletedResponse(CamelModel):
    id: int
    deleted: bool = True


class ErrorResponse(BaseModel):
    """
    Body of every error response, produced by the handlers in main.py.

    `details` carries the exception context for client errors and is
    omitted for server errors.
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable description")
    details: Optional[Dict[str, Any]] = Field(default=None)
    request_id: Optional[str] = Field(default=None, description="Correlation id (X-Request-ID)")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy | degraded")
    version: str
    database: str = Field(description="connected | disconnected")
    uptime_seconds: float
