"""UI patch operations: the wire records delivered to a remote renderer."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class OperationKind(StrEnum):
    ADD_MARKER = "add_marker"
    REMOVE_MARKER = "remove_marker"
    SET_TEXT = "set_text"
    SET_ATTRIBUTE = "set_attribute"
    CLEAR_ATTRIBUTE = "clear_attribute"
    DISPATCH_EVENT = "dispatch_event"


class PatchOperation(BaseModel):
    """One idempotent instruction for the renderer.

    ``target`` is an element identifier; ``None`` addresses the document
    itself (used by dispatched events).
    """

    model_config = ConfigDict(frozen=True)

    kind: OperationKind
    target: str | None = None
    payload: dict[str, Any] = {}

    @classmethod
    def add_marker(cls, target: str, name: str) -> PatchOperation:
        return cls(kind=OperationKind.ADD_MARKER, target=target, payload={"name": name})

    @classmethod
    def remove_marker(cls, target: str, name: str) -> PatchOperation:
        return cls(kind=OperationKind.REMOVE_MARKER, target=target, payload={"name": name})

    @classmethod
    def set_text(cls, target: str, text: str) -> PatchOperation:
        return cls(kind=OperationKind.SET_TEXT, target=target, payload={"text": text})

    @classmethod
    def set_attribute(cls, target: str, name: str, value: str = "") -> PatchOperation:
        return cls(
            kind=OperationKind.SET_ATTRIBUTE,
            target=target,
            payload={"name": name, "value": value},
        )

    @classmethod
    def clear_attribute(cls, target: str, name: str) -> PatchOperation:
        return cls(kind=OperationKind.CLEAR_ATTRIBUTE, target=target, payload={"name": name})

    @classmethod
    def dispatch_event(
        cls, name: str, detail: dict[str, Any], target: str | None = None
    ) -> PatchOperation:
        return cls(
            kind=OperationKind.DISPATCH_EVENT,
            target=target,
            payload={"name": name, "detail": detail},
        )

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready ``{kind, target, payload}`` record."""
        return self.model_dump(mode="json")
