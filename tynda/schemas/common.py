"""
Tynda Backend — Shared Schema Building Blocks
==============================================

What:  The camelCase base model plus the message/error/health envelopes
       used across every route module.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """
    Base for every API schema.

    - alias_generator: snake_case attributes ↔ camelCase JSON keys
    - populate_by_name: request bodies may use either spelling
    - from_attributes: responses validate straight from ORM objects
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(APIModel):
    """Acknowledgement body for mutations that return no record."""
    message: str = Field(description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {"error": "Playlist not found", "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Human-readable error message")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
