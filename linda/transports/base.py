"""Abstract transport base class."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Transport(ABC):
    """Outbound chat channel used for status notifications."""

    @property
    @abstractmethod
    def platform_name(self) -> str: ...

    @abstractmethod
    async def send_message(self, channel: str, content: str) -> None: ...

    async def close(self) -> None:
        """Release network resources. Override if needed."""
