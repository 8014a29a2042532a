"""API request/response Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    status: str
    version: str


class ChannelResponse(BaseModel):
    """Response body for GET /channels/{channel}."""

    channel: str
    subscribers: int
