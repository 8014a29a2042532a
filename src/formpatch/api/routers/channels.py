"""Channel endpoints: subscriber count and the WebSocket patch stream."""

from __future__ import annotations

import asyncio
import contextlib
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from formpatch.api.deps import get_channel_hub
from formpatch.api.schemas import ChannelResponse
from formpatch.service.channel_hub import ChannelHub, Subscription

logger = logging.getLogger("formpatch.api")

router = APIRouter()


@router.get("/{channel}", response_model=ChannelResponse)
async def get_channel(
    channel: str,
    hub: ChannelHub = Depends(get_channel_hub),  # noqa: B008
) -> ChannelResponse:
    """Report how many subscribers are listening on a channel."""
    return ChannelResponse(channel=channel, subscribers=hub.subscriber_count(channel))


async def _forward(websocket: WebSocket, subscription: Subscription) -> None:
    while True:
        message = await subscription.get()
        if message is None:
            await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
            return
        await websocket.send_json(message)


@router.websocket("/{channel}")
async def subscribe(
    websocket: WebSocket,
    channel: str,
    hub: ChannelHub = Depends(get_channel_hub),  # noqa: B008
) -> None:
    """Stream every batch published on ``channel`` until the client disconnects."""
    # Register before accepting so no batch published after the handshake is missed.
    subscription = hub.subscribe(channel)
    await websocket.accept()
    sender = asyncio.create_task(_forward(websocket, subscription))
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Subscriber left channel '%s'", channel)
    finally:
        sender.cancel()
        hub.unsubscribe(subscription)
        with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
            await sender
