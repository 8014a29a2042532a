"""In-process pub/sub hub fanning patch batches out to asyncio subscribers."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from formpatch.models.operations import PatchOperation

logger = logging.getLogger("formpatch.hub")

DEFAULT_QUEUE_SIZE = 100


@dataclass(eq=False)
class Subscription:
    """One subscriber's inbox on a channel, bound to the loop that created it.

    :meth:`get` returns ``None`` once the hub has dropped the subscriber.
    """

    channel: str
    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue[dict[str, Any] | None] = field(default_factory=asyncio.Queue)
    dropped: bool = False

    async def get(self) -> dict[str, Any] | None:
        return await self.queue.get()

    def drop(self) -> None:
        """Discard pending batches and wake the reader with the end marker."""
        self.dropped = True
        while not self.queue.empty():
            self.queue.get_nowait()
        self.queue.put_nowait(None)


class ChannelHub:
    """Channel-keyed fan-out implementing the :class:`Transport` protocol.

    Thread-safe: :meth:`publish` may be called from request handlers running
    in a worker thread; delivery is scheduled onto each subscriber's loop.
    A subscriber with ``queue_size`` undelivered batches is dropped.
    """

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        if queue_size < 1:
            raise ValueError("queue_size must be at least 1")
        self._queue_size = queue_size
        self._lock = threading.Lock()
        self._subscriptions: dict[str, list[Subscription]] = {}

    def subscribe(self, channel: str) -> Subscription:
        """Register a subscriber.  Must be called from inside a running event loop."""
        subscription = Subscription(
            channel=channel,
            loop=asyncio.get_running_loop(),
            # One extra slot keeps room for the end marker.
            queue=asyncio.Queue(maxsize=self._queue_size + 1),
        )
        with self._lock:
            self._subscriptions.setdefault(channel, []).append(subscription)
        logger.debug("Subscribed to channel '%s'", channel)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            subscribers = self._subscriptions.get(subscription.channel, [])
            if subscription in subscribers:
                subscribers.remove(subscription)
            if not subscribers:
                self._subscriptions.pop(subscription.channel, None)
        logger.debug("Unsubscribed from channel '%s'", subscription.channel)

    def subscriber_count(self, channel: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(channel, []))

    def publish(self, channel: str, operations: Sequence[PatchOperation]) -> None:
        message = {"channel": channel, "operations": [op.to_wire() for op in operations]}
        with self._lock:
            subscribers = list(self._subscriptions.get(channel, []))
        for subscription in subscribers:
            if subscription.loop.is_closed():
                self.unsubscribe(subscription)
                continue
            subscription.loop.call_soon_threadsafe(self._deliver, subscription, message)
        logger.debug(
            "Published %d operations to %d subscribers on '%s'",
            len(operations), len(subscribers), channel,
        )

    def _deliver(self, subscription: Subscription, message: dict[str, Any]) -> None:
        # Runs on the subscriber's loop.
        if subscription.dropped:
            return
        if subscription.queue.qsize() < self._queue_size:
            subscription.queue.put_nowait(message)
            return
        logger.warning(
            "Dropping subscriber on '%s' after %d undelivered batches",
            subscription.channel, self._queue_size,
        )
        self.unsubscribe(subscription)
        subscription.drop()
