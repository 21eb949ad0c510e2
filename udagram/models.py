"""Lightweight models shared by the udagram services."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str = Field(default="1.0.0")


class ErrorResponse(BaseModel):
    """Error response envelope for toolkit-level validation failures."""

    error: str = Field(..., description="High-level error message")
    detail: str | None = Field(None, description="Additional context for debugging")


class MessageResponse(BaseModel):
    """Error body used by the users API."""

    auth: bool | None = Field(None, description="Present on auth-related failures")
    message: str
