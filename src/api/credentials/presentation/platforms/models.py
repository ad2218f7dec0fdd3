"""Pydantic models for platform connection checks."""

from pydantic import BaseModel, Field

from credentials.domain.value_objects import PlatformType


class PlatformConnectionResponse(BaseModel):
    """Returned once a request's X-API-Key has been accepted."""

    platform: PlatformType = Field(..., description="The guarded platform")
    connected: bool = Field(..., description="Always true when returned")
