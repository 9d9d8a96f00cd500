"""Telegram transport over the Bot HTTP API."""

from __future__ import annotations

import httpx

from linda.config import TelegramConfig
from linda.core.chunker import chunk_message
from linda.transports.base import Transport
from linda.utils.logging import get_logger

log = get_logger(__name__)


class TelegramError(Exception):
    """Raised when the Bot API answers with ``ok: false`` or an HTTP error."""


class TelegramTransport(Transport):
    def __init__(
        self,
        config: TelegramConfig,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=f"{config.api_url.rstrip('/')}/bot{config.bot_token}",
            timeout=timeout,
            transport=transport,
        )

    @property
    def platform_name(self) -> str:
        return "telegram"

    async def send_message(self, channel: str, content: str) -> None:
        chunks = chunk_message(content, limit=self._config.message_limit)
        for chunk in chunks:
            response = await self._client.post(
                "/sendMessage", json={"chat_id": channel, "text": chunk}
            )
            try:
                data = response.json()
            except ValueError:
                data = {}
            if response.is_error or not data.get("ok"):
                raise TelegramError(
                    f"sendMessage failed with {response.status_code}: "
                    f"{data.get('description', 'no description')}"
                )
        log.debug("telegram_message_sent", chat_id=channel, chunks=len(chunks))

    async def close(self) -> None:
        await self._client.aclose()
