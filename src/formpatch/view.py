"""Form markup helpers stamping the ids the broadcaster targets."""

from __future__ import annotations

from typing import Any

from markupsafe import Markup, escape

from formpatch.models.config import BroadcastConfig
from formpatch.patching.selectors import SelectorKind, selector


def _attributes(options: dict[str, Any]) -> Markup:
    parts = []
    for name, value in options.items():
        if value is None or value is False:
            continue
        attr = escape(name.rstrip("_").replace("_", "-"))
        parts.append(attr if value is True else Markup('{}="{}"').format(attr, value))
    return Markup(" ").join(parts)


def _tag(name: str, content: Any, options: dict[str, Any]) -> Markup:
    return Markup("<{0} {1}>{2}</{0}>").format(Markup(name), _attributes(options), content)


class FormHelper:
    """Id and markup builders for one model's form.

    Ids come from :func:`formpatch.patching.selectors.selector`, the same
    function the walker uses, so rendered elements and broadcast targets
    always agree for a given config.
    """

    def __init__(self, model: Any, config: BroadcastConfig) -> None:
        self.model = model
        self.config = config

    def form_id(self) -> str:
        return selector(self.model, SelectorKind.FORM, config=self.config)

    def submit_id(self) -> str:
        return selector(self.model, SelectorKind.SUBMIT, config=self.config)

    def container_id_for(self, attribute: str) -> str:
        return selector(self.model, SelectorKind.CONTAINER, attribute, config=self.config)

    def error_id_for(self, attribute: str) -> str:
        return selector(self.model, SelectorKind.ERROR, attribute, config=self.config)

    def base_error_id(self) -> str:
        return selector(self.model, SelectorKind.BASE_ERROR, config=self.config)

    def container_for(self, attribute: str, content: Any = "", **options: Any) -> Markup:
        """``<div id=...>content</div>``; ``content`` is escaped unless it is already Markup."""
        options["id"] = self.container_id_for(attribute)
        return _tag("div", escape(content), options)

    def error_for(self, attribute: str, **options: Any) -> Markup:
        options["id"] = self.error_id_for(attribute)
        options.setdefault("class_", self.config.error_field_class)
        return _tag("span", "", options)

    def base_error(self, **options: Any) -> Markup:
        options["id"] = self.base_error_id()
        options.setdefault("class_", self.config.base_error_field_class)
        return _tag("span", "", options)
