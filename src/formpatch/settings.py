"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from formpatch.models.config import DEFAULT_CHANNEL, BroadcastConfig


class Settings(BaseSettings):
    """Configuration for a formpatch process.

    Values are read from environment variables and from a ``.env`` file
    in the working directory.  Read once at startup; the broadcast half is
    frozen into a :class:`BroadcastConfig` by :meth:`broadcast_config`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"

    # REST / WebSocket API
    api_server_host: str = "localhost"
    api_server_port: int = 8000
    port: int | None = None  # Cloud Run injects PORT; takes precedence over api_server_port
    subscriber_queue_size: int = 100  # pending batches per websocket before it is dropped

    @property
    def effective_port(self) -> int:
        """Return the port to listen on (Cloud Run PORT takes precedence)."""
        return self.port if self.port is not None else self.api_server_port

    # Broadcast
    channel_name: str = DEFAULT_CHANNEL
    form_selector: str = "form"
    container_selector: str = "container"
    error_selector: str = "error"
    base_error_selector: str = "base_error"
    submit_selector: str | None = None
    form_class: str = "invalid"
    error_class: str = "error"
    error_field_class: str = "small align-bottom text-danger"
    base_error_field_class: str = "align-bottom text-danger"
    suffix: str = ""
    full_messages: bool = False
    base_message_separator: str = ", "
    event_prefix: str = "formpatch"
    emit_events: bool = False
    add_css: bool = True
    inject_inline: bool = True
    disable_submit: bool = False

    def broadcast_config(self) -> BroadcastConfig:
        """Freeze the broadcast settings; every context resolves to ``channel_name``."""
        channel_name = self.channel_name

        def channel(context: Any) -> str:
            return channel_name

        values = self.model_dump(include=set(BroadcastConfig.model_fields) - {"channel"})
        return BroadcastConfig(channel=channel, **values)
