"""FastAPI application factory for formpatch."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from formpatch import __version__
from formpatch.api.deps import init_channel_hub, reset_channel_hub
from formpatch.api.routers import channels
from formpatch.api.schemas import HealthResponse
from formpatch.service.channel_hub import ChannelHub
from formpatch.settings import Settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Create the ChannelHub for the lifetime of the application."""
    settings: Settings = app.state.settings
    init_channel_hub(
        ChannelHub(queue_size=settings.subscriber_queue_size), settings.broadcast_config()
    )
    try:
        yield
    finally:
        reset_channel_hub()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="formpatch",
        description="Streams validation-state UI patches to subscribed form renderers.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(channels.router, prefix="/channels", tags=["channels"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("formpatch.api")
    logger.info(
        "formpatch API server v%s starting (host=%s, port=%d)",
        __version__, settings.api_server_host, settings.effective_port,
    )

    uvicorn.run(
        "formpatch.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
