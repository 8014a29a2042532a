"""Per-attribute validation messages attached to a form-backing model."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from pydantic import ValidationError

BASE = "base"


def humanize(attribute: str) -> str:
    """Turn an attribute path into a label: ``items.unit_price`` -> ``Items unit price``."""
    text = attribute.replace(".", " ").replace("_", " ").strip()
    return text[:1].upper() + text[1:]


def full_message(attribute: str, message: str) -> str:
    """Prefix a message with its humanized attribute; base messages stay bare."""
    if attribute == BASE:
        return message
    return f"{humanize(attribute)} {message}"


class ErrorCollection(Mapping[str, list[str]]):
    """Ordered mapping of attribute path to messages.

    Only attributes with at least one message are stored, so key presence
    is equivalent to the attribute being invalid.  ``"base"`` holds
    model-level messages that belong to no single field.
    """

    def __init__(self, messages: Mapping[str, Iterable[str]] | None = None) -> None:
        self._messages: dict[str, list[str]] = {}
        if messages:
            for attribute, items in messages.items():
                for message in items:
                    self.add(attribute, message)

    def __getitem__(self, attribute: str) -> list[str]:
        return list(self._messages[attribute])

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"ErrorCollection({self._messages!r})"

    def add(self, attribute: str, message: str) -> None:
        self._messages.setdefault(str(attribute), []).append(message)

    def clear(self) -> None:
        self._messages.clear()

    def merge(self, other: Mapping[str, Iterable[str]]) -> None:
        for attribute, items in other.items():
            for message in items:
                self.add(attribute, message)

    def any(self) -> bool:
        return bool(self._messages)

    def full_message(self, attribute: str, message: str) -> str:
        return full_message(attribute, message)

    def full_messages_for(self, attribute: str) -> list[str]:
        return [self.full_message(attribute, m) for m in self._messages.get(attribute, [])]

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> ErrorCollection:
        """Collect pydantic errors keyed by attribute path.

        An empty location (model validators) maps to ``base``; list
        indices are dropped so ``("items", 0, "price")`` becomes
        ``items.price``.
        """
        errors = cls()
        for error in exc.errors():
            parts = [str(p) for p in error["loc"] if not isinstance(p, int)]
            attribute = ".".join(parts) if parts else BASE
            errors.add(attribute, _message_for(error))
        return errors


def _message_for(error: Mapping) -> str:
    # Custom validators raise ValueError/AssertionError; surface their text
    # rather than pydantic's "Value error, ..." wrapper.
    ctx = error.get("ctx") or {}
    if error.get("type") in ("value_error", "assertion_error") and "error" in ctx:
        return str(ctx["error"])
    return str(error["msg"])
