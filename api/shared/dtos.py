"""Shared DTOs for the Chat API."""
from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseDTO(BaseModel):
    """Base DTO with common configuration."""

    model_config = ConfigDict(from_attributes=True)


class CamelDTO(BaseDTO):
    """DTO exchanged with clients using camelCase keys.

    Accepts both camelCase and snake_case on input.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class HealthCheckResponse(BaseDTO):
    """Health check response DTO."""
    status: str = Field(description="Service status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = Field(default="0.1.0")
    dependencies: Dict[str, str] = Field(default_factory=dict)
