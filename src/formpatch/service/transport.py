"""Transport boundary: where a flushed batch of operations leaves the core."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from formpatch.models.operations import PatchOperation


@runtime_checkable
class Transport(Protocol):
    """Delivers one ordered batch of operations to every subscriber of ``channel``."""

    def publish(self, channel: str, operations: Sequence[PatchOperation]) -> None: ...


@dataclass(frozen=True)
class Broadcast:
    """A batch as seen by :class:`InMemoryTransport`."""

    channel: str
    operations: tuple[PatchOperation, ...]


class InMemoryTransport:
    """Records every published batch.  Thread-safe."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._broadcasts: list[Broadcast] = []

    def publish(self, channel: str, operations: Sequence[PatchOperation]) -> None:
        with self._lock:
            self._broadcasts.append(Broadcast(channel=channel, operations=tuple(operations)))

    @property
    def broadcasts(self) -> list[Broadcast]:
        with self._lock:
            return list(self._broadcasts)

    @property
    def last(self) -> Broadcast | None:
        with self._lock:
            return self._broadcasts[-1] if self._broadcasts else None

    def clear(self) -> None:
        with self._lock:
            self._broadcasts.clear()
