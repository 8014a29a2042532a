"""Error-tree walk: model + attribute spec -> ordered patch operations."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from formpatch.models.config import BroadcastConfig
from formpatch.models.errors import BASE, full_message
from formpatch.patching.associations import Collection, Singular, resolve_association
from formpatch.patching.attribute_spec import EMPTY_SPEC, AttributeSpec, EntryKind, SpecEntry
from formpatch.patching.selectors import SelectorKind, dom_id, selector_for
from formpatch.patching.session import BroadcastSession

logger = logging.getLogger("formpatch.walker")


class MissingErrorStateError(TypeError):
    """Raised when a model exposes no error collection to read."""

    def __init__(self, model: Any) -> None:
        self.model = model
        super().__init__(
            f"{type(model).__name__} has no 'errors' mapping; cannot broadcast its validity"
        )


@dataclass(frozen=True)
class Hop:
    """One association step; ``index`` is set only for to-many associations."""

    name: str
    index: int | None = None


@dataclass(frozen=True)
class Ancestry:
    """Path from the root model to the node being walked."""

    root: str
    hops: tuple[Hop, ...] = ()

    def extend(self, name: str, index: int | None = None) -> Ancestry:
        return Ancestry(root=self.root, hops=self.hops + (Hop(name=name, index=index),))

    @property
    def resource(self) -> str:
        """Flattened label, e.g. ``order_items_attributes_0``, matching form field ids."""
        label = self.root
        for hop in self.hops:
            label += f"_{hop.name}_attributes"
            if hop.index is not None:
                label += f"_{hop.index}"
        return label

    def __len__(self) -> int:
        return len(self.hops)


def error_state(model: Any) -> Mapping[str, Any]:
    """Return the model's error mapping or raise :class:`MissingErrorStateError`."""
    errors = getattr(model, "errors", None) if model is not None else None
    if not isinstance(errors, Mapping):
        raise MissingErrorStateError(model)
    return errors


def has_errors(errors: Mapping[str, Any]) -> bool:
    return any(errors.get(attribute) for attribute in errors)


def ensure_validated(model: Any) -> Mapping[str, Any]:
    """Run the model's validation once if it currently reports no errors.

    A model that already carries errors is trusted as-is; re-validating after
    mutation is the caller's job.
    """
    errors = error_state(model)
    if not has_errors(errors):
        validate = getattr(model, "is_valid", None)
        if callable(validate):
            validate()
            errors = error_state(model)
    return errors


class ErrorTreeWalker:
    """Walks a model along an :class:`AttributeSpec`, appending to a session.

    For each node the base-error text is set first, then every entry is
    visited in spec order.  Each plain attribute yields either the invalid
    or the valid triple (event, marker, inline text), never both.
    """

    def __init__(self, config: BroadcastConfig, session: BroadcastSession) -> None:
        self._config = config
        self._session = session

    def walk(self, model: Any, spec: AttributeSpec, ancestry: Ancestry) -> None:
        errors = ensure_validated(model)
        identity = dom_id(model)
        self._base_error(identity, errors)
        for entry in spec:
            if entry.kind == EntryKind.PLAIN:
                self._attribute(identity, errors, entry.name, ancestry)
            else:
                self._association(model, entry, ancestry)

    # -- nodes ---------------------------------------------------------------

    def _base_error(self, identity: str, errors: Mapping[str, Any]) -> None:
        if not self._config.inject_inline:
            return
        target = selector_for(identity, SelectorKind.BASE_ERROR, config=self._config)
        messages = errors.get(BASE) or []
        self._session.set_text(target, self._config.base_message_separator.join(messages))

    def _attribute(
        self, identity: str, errors: Mapping[str, Any], attribute: str, ancestry: Ancestry
    ) -> None:
        config = self._config
        container = selector_for(identity, SelectorKind.CONTAINER, attribute, config=config)
        inline = selector_for(identity, SelectorKind.ERROR, attribute, config=config)
        messages = errors.get(attribute) or []

        if messages:
            text = messages[0]
            if config.full_messages:
                text = full_message(attribute, text)
            text += config.suffix
            if config.emit_events:
                self._session.dispatch_event(
                    config.event_name("attribute:invalid"),
                    {"resource": ancestry.resource, "attribute": attribute, "text": text},
                )
            if config.add_css:
                self._session.add_marker(container, config.error_class)
            if config.inject_inline:
                self._session.set_text(inline, text)
        else:
            if config.emit_events:
                self._session.dispatch_event(
                    config.event_name("attribute:valid"),
                    {"resource": ancestry.resource, "attribute": attribute},
                )
            if config.add_css:
                self._session.remove_marker(container, config.error_class)
            if config.inject_inline:
                self._session.set_text(inline, "")

    def _association(self, model: Any, entry: SpecEntry, ancestry: Ancestry) -> None:
        value = resolve_association(model, entry.name)

        match (entry.kind, value):
            case (EntryKind.SINGULAR, Singular(member=None)):
                # Nothing associated: only the base-error text of a node the
                # form never rendered.
                logger.debug("Association '%s' is empty; walking it as a bare node", entry.name)
                self._base_error(entry.name, {})
            case (EntryKind.SINGULAR, Singular(member=member)):
                self.walk(member, entry.nested or EMPTY_SPEC, ancestry.extend(entry.name))
            case (EntryKind.INDEXED, Collection(members=members)):
                self._collection(members, entry, ancestry)
            case _:
                logger.debug(
                    "Spec for '%s' is %s but the association is %s; skipping",
                    entry.name, entry.kind, type(value).__name__,
                )

    def _collection(self, members: tuple[Any, ...], entry: SpecEntry, ancestry: Ancestry) -> None:
        for index, member in enumerate(members):
            sub_spec = entry.indexed.get(str(index))
            if sub_spec is None or member is None:
                continue
            self.walk(member, sub_spec, ancestry.extend(entry.name, index))

        missing = [key for key in entry.indexed if int(key) >= len(members)]
        if missing:
            logger.debug(
                "Skipping indices %s of '%s': only %d members",
                ", ".join(missing), entry.name, len(members),
            )
