"""Entry point: push a model's current validity to the forms rendered for it."""

from __future__ import annotations

import logging
from typing import Any

from formpatch.models.config import BroadcastConfig
from formpatch.models.operations import PatchOperation
from formpatch.patching.attribute_spec import normalize_spec
from formpatch.patching.selectors import SelectorKind, param_key, selector
from formpatch.patching.session import BroadcastSession
from formpatch.patching.walker import Ancestry, ErrorTreeWalker, error_state, has_errors
from formpatch.service.transport import Transport

logger = logging.getLogger("formpatch.broadcaster")


class Broadcaster:
    """Builds and publishes the patch batch for one model per call.

    ``context`` is handed to ``config.channel`` to pick the channel; in a
    web app it is typically the current request.
    """

    def __init__(
        self,
        config: BroadcastConfig,
        transport: Transport,
        context: Any = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._context = context

    @property
    def config(self) -> BroadcastConfig:
        return self._config

    def collect(self, model: Any, attributes: Any) -> BroadcastSession:
        """Walk ``model`` and return the unflushed session holding its operations.

        Raises :class:`MissingErrorStateError` or :class:`InvalidSpecError`
        before anything is collected.
        """
        error_state(model)
        spec = normalize_spec(attributes)
        resource = param_key(model)

        session = BroadcastSession(self._transport)
        ErrorTreeWalker(self._config, session).walk(model, spec, Ancestry(root=resource))
        self._form_state(session, model, resource)
        return session

    def broadcast_errors(self, model: Any, attributes: Any) -> tuple[PatchOperation, ...]:
        """Collect operations for ``model`` and publish them as one batch.

        Returns the published operations.
        """
        session = self.collect(model, attributes)
        channel = self._config.channel(self._context)
        logger.debug(
            "Broadcasting %d operations for '%s' on '%s'",
            len(session), param_key(model), channel,
        )
        return session.flush(channel)

    def _form_state(self, session: BroadcastSession, model: Any, resource: str) -> None:
        config = self._config
        form = selector(model, SelectorKind.FORM, config=config)
        submit = selector(model, SelectorKind.SUBMIT, config=config)

        if has_errors(error_state(model)):
            if config.emit_events:
                session.dispatch_event(config.event_name("form:invalid"), {"resource": resource})
            if config.form_class:
                session.add_marker(form, config.form_class)
            if config.disable_submit:
                session.set_attribute(submit, "disabled")
        else:
            if config.emit_events:
                session.dispatch_event(config.event_name("form:valid"), {"resource": resource})
            if config.form_class:
                session.remove_marker(form, config.form_class)
            if config.disable_submit:
                session.clear_attribute(submit, "disabled")


def broadcast_errors(
    model: Any,
    attributes: Any,
    *,
    transport: Transport,
    config: BroadcastConfig | None = None,
    context: Any = None,
) -> tuple[PatchOperation, ...]:
    """One-shot form of :meth:`Broadcaster.broadcast_errors`."""
    broadcaster = Broadcaster(config or BroadcastConfig(), transport, context)
    return broadcaster.broadcast_errors(model, attributes)
