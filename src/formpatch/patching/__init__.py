"""Error-tree walking, selector derivation and patch batching."""

from formpatch.patching.attribute_spec import (
    AttributeSpec,
    EntryKind,
    InvalidSpecError,
    SpecEntry,
    normalize_spec,
    parse_form_keys,
)
from formpatch.patching.broadcaster import Broadcaster, broadcast_errors
from formpatch.patching.selectors import SelectorKind, dom_id, param_key, selector
from formpatch.patching.session import BroadcastSession, SessionClosedError
from formpatch.patching.walker import Ancestry, ErrorTreeWalker, MissingErrorStateError

__all__ = [
    "Ancestry",
    "AttributeSpec",
    "BroadcastSession",
    "Broadcaster",
    "EntryKind",
    "ErrorTreeWalker",
    "InvalidSpecError",
    "MissingErrorStateError",
    "SelectorKind",
    "SessionClosedError",
    "SpecEntry",
    "broadcast_errors",
    "dom_id",
    "normalize_spec",
    "param_key",
    "parse_form_keys",
    "selector",
]
