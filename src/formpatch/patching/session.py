"""Broadcast session: an ordered, flush-once accumulator of patch operations."""

from __future__ import annotations

import logging
from typing import Any

from formpatch.models.operations import PatchOperation
from formpatch.service.transport import Transport

logger = logging.getLogger("formpatch.session")


class SessionClosedError(RuntimeError):
    """Raised when a session is used after it has been flushed."""


class BroadcastSession:
    """Collects operations for one broadcast and hands them to the transport as one batch.

    Not thread-safe: a session belongs to a single invocation.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport
        self._operations: list[PatchOperation] = []
        self._flushed = False

    @property
    def operations(self) -> tuple[PatchOperation, ...]:
        return tuple(self._operations)

    @property
    def flushed(self) -> bool:
        return self._flushed

    def __len__(self) -> int:
        return len(self._operations)

    def append(self, operation: PatchOperation) -> None:
        if self._flushed:
            raise SessionClosedError("Cannot append to a session that was already flushed")
        self._operations.append(operation)

    # -- operation builders ----------------------------------------------------

    def dispatch_event(
        self, name: str, detail: dict[str, Any], target: str | None = None
    ) -> None:
        self.append(PatchOperation.dispatch_event(name, detail, target))

    def add_marker(self, target: str, name: str) -> None:
        self.append(PatchOperation.add_marker(target, name))

    def remove_marker(self, target: str, name: str) -> None:
        self.append(PatchOperation.remove_marker(target, name))

    def set_text(self, target: str, text: str) -> None:
        self.append(PatchOperation.set_text(target, text))

    def set_attribute(self, target: str, name: str, value: str = "") -> None:
        self.append(PatchOperation.set_attribute(target, name, value))

    def clear_attribute(self, target: str, name: str) -> None:
        self.append(PatchOperation.clear_attribute(target, name))

    # -- delivery --------------------------------------------------------------

    def flush(self, channel: str) -> tuple[PatchOperation, ...]:
        """Publish every collected operation to ``channel`` in a single call.

        The session is consumed even when the transport raises; transport
        errors propagate to the caller unchanged.
        """
        if self._flushed:
            raise SessionClosedError("Session was already flushed")
        self._flushed = True
        batch = tuple(self._operations)
        logger.debug("Flushing %d operations to channel '%s'", len(batch), channel)
        self._transport.publish(channel, batch)
        return batch
