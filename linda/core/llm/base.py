"""LLM provider interface and the retry policy every backend shares."""

from __future__ import annotations

import asyncio
import random
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, TypeVar

from linda.core.llm.types import LLMMessage, LLMResponse
from linda.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")


class LLMProvider(ABC):
    max_retries: int = 2

    @abstractmethod
    async def complete(
        self,
        messages: list[LLMMessage],
        system: str | None = None,
        tools: list[dict[str, Any]] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse: ...

    async def close(self) -> None:
        """Release the underlying HTTP client."""

    def _is_transient(self, exc: Exception) -> bool:
        """Whether ``exc`` is worth another attempt (rate limits, 5xx, refused connections)."""
        return False

    async def _retrying(self, call: Callable[[], Awaitable[T]]) -> T:
        attempt = 0
        while True:
            try:
                return await call()
            except Exception as e:
                if attempt >= self.max_retries or not self._is_transient(e):
                    raise
                wait = (2 ** attempt) + random.uniform(0, 1)
                log.warning(
                    "llm_retry",
                    provider=type(self).__name__,
                    attempt=attempt,
                    wait=round(wait, 2),
                    error=str(e),
                )
                await asyncio.sleep(wait)
                attempt += 1
