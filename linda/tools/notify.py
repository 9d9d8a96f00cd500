"""Send a Telegram notification from the tool loop."""

from __future__ import annotations

from typing import Any

import httpx

from linda.config import TelegramConfig
from linda.transports.base import Transport
from linda.transports.telegram_transport import TelegramError
from linda.tools.base import BaseTool, ToolResult


class TelegramNotifyTool(BaseTool):
    def __init__(self, config: TelegramConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    @property
    def name(self) -> str:
        return "send_telegram_notification"

    @property
    def description(self) -> str:
        return "Send a Telegram notification to the configured chat."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "message": {"type": "string", "description": "Message text."},
            },
            "required": ["message"],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        message: str = kwargs["message"]

        if not self._config.configured:
            return ToolResult(success=False, error="Missing Telegram bot token or chat id")

        try:
            await self._transport.send_message(self._config.chat_id, message)
        except (TelegramError, httpx.HTTPError) as e:
            return ToolResult(success=False, error=str(e))
        return ToolResult(success=True, output="Telegram notification sent")
