"""Immutable broadcast configuration shared by selectors, walker and view helpers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict

DEFAULT_CHANNEL = "FormPatchChannel"


def default_channel(context: Any) -> str:
    """Channel resolver used when none is configured: every context shares one channel."""
    return DEFAULT_CHANNEL


class BroadcastConfig(BaseModel):
    """Labels, CSS classes and feature flags for one process.

    Every selector is derived from the label fields, so the same config
    must be used by the code that renders the form and the code that
    broadcasts patches for it.  Build variations with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    channel: Callable[[Any], str] = default_channel

    # Selector labels
    form_selector: str = "form"
    container_selector: str = "container"
    error_selector: str = "error"
    base_error_selector: str = "base_error"
    submit_selector: str | None = None  # None: submit control shares the form selector

    # CSS classes
    form_class: str = "invalid"
    error_class: str = "error"
    error_field_class: str = "small align-bottom text-danger"
    base_error_field_class: str = "align-bottom text-danger"

    # Message text
    suffix: str = ""
    full_messages: bool = False
    base_message_separator: str = ", "
    event_prefix: str = "formpatch"

    # Feature flags
    emit_events: bool = False
    add_css: bool = True
    inject_inline: bool = True
    disable_submit: bool = False

    def event_name(self, name: str) -> str:
        """Namespace an event name: ``attribute:invalid`` -> ``formpatch:attribute:invalid``."""
        return f"{self.event_prefix}:{name}" if self.event_prefix else name
