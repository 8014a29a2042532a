"""Dependency injection for FastAPI: ChannelHub singleton and request broadcasters."""

from __future__ import annotations

from fastapi import Depends, Request

from formpatch.models.config import BroadcastConfig
from formpatch.patching.broadcaster import Broadcaster
from formpatch.service.channel_hub import ChannelHub

_channel_hub: ChannelHub | None = None
_broadcast_config: BroadcastConfig | None = None


def init_channel_hub(hub: ChannelHub, config: BroadcastConfig) -> None:
    """Set the global ChannelHub and broadcast config (called at app startup)."""
    global _channel_hub, _broadcast_config  # noqa: PLW0603
    _channel_hub = hub
    _broadcast_config = config


def get_channel_hub() -> ChannelHub:
    """FastAPI ``Depends`` provider for ChannelHub."""
    if _channel_hub is None:
        raise RuntimeError("ChannelHub not initialised; call init_channel_hub() first")
    return _channel_hub


def get_broadcast_config() -> BroadcastConfig:
    """FastAPI ``Depends`` provider for the process-wide BroadcastConfig."""
    if _broadcast_config is None:
        raise RuntimeError("BroadcastConfig not initialised; call init_channel_hub() first")
    return _broadcast_config


def get_broadcaster(
    request: Request,
    hub: ChannelHub = Depends(get_channel_hub),  # noqa: B008
    config: BroadcastConfig = Depends(get_broadcast_config),  # noqa: B008
) -> Broadcaster:
    """Request-scoped Broadcaster; the channel resolver sees the request as context."""
    return Broadcaster(config, hub, context=request)


def reset_channel_hub() -> None:
    """Clear the global ChannelHub and config (for tests)."""
    global _channel_hub, _broadcast_config  # noqa: PLW0603
    _channel_hub = None
    _broadcast_config = None
