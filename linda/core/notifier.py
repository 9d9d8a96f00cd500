"""Best-effort completion notifications to a chat channel."""

from __future__ import annotations

from linda.config import TelegramConfig
from linda.core.decision import Action
from linda.transports.base import Transport
from linda.utils.logging import get_logger

log = get_logger(__name__)

NOT_CONFIGURED = "Missing Telegram bot token or chat id"


def compose_notification(action: Action, summary: str, result: str, failed: bool = False) -> str:
    outcome = "failed" if failed else "completed"
    label = "Error" if failed else "Result"
    return f"Linda update: {action.value} {outcome}. Summary: {summary}. {label}: {result}"


class Notifier:
    def __init__(self, config: TelegramConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def notify(
        self, action: Action, summary: str, result: str, failed: bool = False
    ) -> str:
        """Send the status message and return a delivery status; never raises."""
        if not self._config.configured:
            return NOT_CONFIGURED

        message = compose_notification(action, summary, result, failed=failed)
        try:
            await self._transport.send_message(self._config.chat_id, message)
        except Exception:
            log.exception("notification_failed", platform=self._transport.platform_name)
            return "Telegram notification failed"
        return "Telegram notification sent"
