"""Request and response models for the colony HTTP API."""

from pydantic import BaseModel, Field


class BuildRequest(BaseModel):
    """Target cell for a build."""

    x: int
    y: int


class SpeedRequest(BaseModel):
    """Requested tick interval. Values outside the supported range are clamped."""

    intervalMs: int = Field(..., description="Milliseconds between ticks")


class SpeedResponse(BaseModel):
    intervalMs: int
