"""Anthropic Messages API provider."""

from __future__ import annotations

from typing import Any

from anthropic import APIConnectionError, APIStatusError, AsyncAnthropic, RateLimitError

from linda.config import LLMConfig
from linda.core.llm.base import LLMProvider
from linda.core.llm.types import LLMMessage, LLMResponse, ToolCall


class AnthropicProvider(LLMProvider):
    def __init__(self, config: LLMConfig, client: AsyncAnthropic | None = None) -> None:
        self._config = config
        self.max_retries = config.max_retries
        # The SDK's own retries are off; _retrying owns the policy
        self._client = client or AsyncAnthropic(
            api_key=config.api_key,
            timeout=config.timeout,
            max_retries=0,
        )

    async def complete(
        self,
        messages: list[LLMMessage],
        system: str | None = None,
        tools: list[dict[str, Any]] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        request: dict[str, Any] = {
            "model": self._config.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "max_tokens": max_tokens or self._config.max_tokens,
            "temperature": self._config.temperature if temperature is None else temperature,
        }
        if system:
            request["system"] = system
        if tools:
            request["tools"] = tools

        message = await self._retrying(lambda: self._client.messages.create(**request))

        text = "".join(block.text for block in message.content if block.type == "text")
        tool_calls = [
            ToolCall(id=block.id, name=block.name, arguments=dict(block.input))
            for block in message.content
            if block.type == "tool_use"
        ]
        return LLMResponse(
            content=text,
            tool_calls=tool_calls,
            stop_reason=message.stop_reason,
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
        )

    async def close(self) -> None:
        await self._client.close()

    def _is_transient(self, exc: Exception) -> bool:
        if isinstance(exc, (RateLimitError, APIConnectionError)):
            return True
        return isinstance(exc, APIStatusError) and exc.status_code >= 500
