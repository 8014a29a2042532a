"""Deterministic element identifiers derived from model identity and config labels.

Both sides of the wire use these functions: the view helpers stamp them on
rendered elements and the walker targets them with patch operations.

    <dom-id>_<form>                        form element
    <dom-id>_<form>_<attr>_<container>     field container
    <dom-id>_<form>_<attr>_<error>         inline message span
    <dom-id>_<form>_<base_error>           model-level message span
"""

from __future__ import annotations

import re
from enum import StrEnum
from typing import Any

from formpatch.models.config import BroadcastConfig

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class SelectorKind(StrEnum):
    FORM = "form"
    SUBMIT = "submit"
    CONTAINER = "container"
    ERROR = "error"
    BASE_ERROR = "base_error"


_ATTRIBUTE_KINDS = frozenset({SelectorKind.CONTAINER, SelectorKind.ERROR})


def param_key(model: Any) -> str:
    """Singular snake-case name of the model's type (``LineItem`` -> ``line_item``)."""
    name = getattr(model, "model_name", None)
    if isinstance(name, str) and name:
        return name
    return _CAMEL_RE.sub("_", type(model).__name__).lower()


def record_key(model: Any) -> str | None:
    """Primary key as a string, or ``None`` for records that were never saved."""
    to_key = getattr(model, "to_key", None)
    if callable(to_key):
        parts = to_key()
        return "_".join(str(p) for p in parts) if parts else None
    key = getattr(model, "id", None)
    return None if key is None else str(key)


def dom_id(model: Any) -> str:
    """``post_42`` for a persisted record, bare ``post`` for an unsaved one."""
    key = record_key(model)
    prefix = param_key(model)
    return prefix if key is None else f"{prefix}_{key}"


def selector_for(
    identity: str,
    kind: SelectorKind,
    attribute: str | None = None,
    *,
    config: BroadcastConfig,
) -> str:
    """Selector for an already-computed dom identity."""
    form = f"{identity}_{config.form_selector}"
    if kind in _ATTRIBUTE_KINDS and not attribute:
        raise ValueError(f"Selector kind '{kind}' requires an attribute")
    if kind == SelectorKind.FORM:
        return form
    if kind == SelectorKind.SUBMIT:
        # Unset submit label: the submit toggle targets the form element itself.
        return form if config.submit_selector is None else f"{identity}_{config.submit_selector}"
    if kind == SelectorKind.CONTAINER:
        return f"{form}_{attribute}_{config.container_selector}"
    if kind == SelectorKind.ERROR:
        return f"{form}_{attribute}_{config.error_selector}"
    return f"{form}_{config.base_error_selector}"


def selector(
    model: Any,
    kind: SelectorKind,
    attribute: str | None = None,
    *,
    config: BroadcastConfig,
) -> str:
    """Selector for ``kind`` (and ``attribute`` where the kind is per-field) of ``model``."""
    return selector_for(dom_id(model), kind, attribute, config=config)
