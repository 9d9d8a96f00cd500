"""Linda transports."""

from linda.transports.base import Transport
from linda.transports.telegram_transport import TelegramError, TelegramTransport

__all__ = [
    "Transport",
    "TelegramError",
    "TelegramTransport",
]
