"""
Reprint Backend — Shared Response Schemas
===========================================

Error and health models used by every router.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Human-readable description, safe to show in the UI
        details: Optional longer explanation
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "Title and author are required",
            "details": "Please provide both title and author",
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Human-readable error description")
    details: Optional[str] = Field(default=None, description="Additional explanation")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring and load balancer probes.
    """

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
