"""OpenAI-compatible chat-completions provider over httpx."""

from __future__ import annotations

import json
from typing import Any
from uuid import uuid4

import httpx

from linda.config import LLMConfig
from linda.core.llm.base import LLMProvider
from linda.core.llm.types import LLMMessage, LLMResponse, ToolCall


def _to_openai_tools(tools: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert Anthropic-style tool schemas to the function-calling format."""
    return [
        {
            "type": "function",
            "function": {
                "name": tool["name"],
                "description": tool.get("description", ""),
                "parameters": tool.get("input_schema", {"type": "object", "properties": {}}),
            },
        }
        for tool in tools
    ]


def _to_openai_messages(messages: list[LLMMessage], system: str | None) -> list[dict[str, Any]]:
    """Flatten content blocks into chat-completions messages.

    Assistant ``tool_use`` blocks become ``tool_calls``; user ``tool_result``
    blocks become one ``tool`` message each.
    """
    api_messages: list[dict[str, Any]] = []
    if system:
        api_messages.append({"role": "system", "content": system})

    for msg in messages:
        if isinstance(msg.content, str):
            api_messages.append({"role": msg.role, "content": msg.content})
            continue

        texts = [b["text"] for b in msg.content if b.get("type") == "text"]
        tool_uses = [b for b in msg.content if b.get("type") == "tool_use"]
        tool_results = [b for b in msg.content if b.get("type") == "tool_result"]

        if tool_uses:
            api_messages.append({
                "role": "assistant",
                "content": "\n".join(texts) or None,
                "tool_calls": [
                    {
                        "id": b["id"],
                        "type": "function",
                        "function": {"name": b["name"], "arguments": json.dumps(b.get("input", {}))},
                    }
                    for b in tool_uses
                ],
            })
        elif texts:
            api_messages.append({"role": msg.role, "content": "\n".join(texts)})

        for b in tool_results:
            api_messages.append({
                "role": "tool",
                "tool_call_id": b["tool_use_id"],
                "content": str(b.get("content", "")),
            })

    return api_messages


class OpenAIProvider(LLMProvider):
    """Chat-completions provider for OpenAI and compatible servers."""

    def __init__(self, config: LLMConfig, client: httpx.AsyncClient | None = None) -> None:
        self._config = config
        self._model = config.model
        self.max_retries = config.max_retries
        headers = {"Authorization": f"Bearer {config.api_key}"} if config.api_key else {}
        self._client = client or httpx.AsyncClient(
            base_url=config.base_url.rstrip("/"),
            headers=headers,
            timeout=config.timeout,
        )

    async def complete(
        self,
        messages: list[LLMMessage],
        system: str | None = None,
        tools: list[dict[str, Any]] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        body: dict[str, Any] = {
            "model": self._model,
            "messages": _to_openai_messages(messages, system),
            "max_tokens": max_tokens or self._config.max_tokens,
            "temperature": temperature if temperature is not None else self._config.temperature,
        }
        if tools:
            body["tools"] = _to_openai_tools(tools)

        resp = await self._retrying(lambda: self._post("/chat/completions", body))
        data = resp.json()

        choice = data["choices"][0]
        msg = choice["message"]

        tool_calls: list[ToolCall] = []
        for tc in msg.get("tool_calls") or []:
            fn = tc.get("function", {})
            args = fn.get("arguments", "{}")
            if isinstance(args, str):
                try:
                    args = json.loads(args)
                except json.JSONDecodeError:
                    args = {}
            tool_calls.append(ToolCall(
                id=tc.get("id") or uuid4().hex[:12],
                name=fn.get("name", ""),
                arguments=args,
            ))

        usage = data.get("usage") or {}
        return LLMResponse(
            content=msg.get("content") or "",
            tool_calls=tool_calls,
            stop_reason=choice.get("finish_reason"),
            input_tokens=usage.get("prompt_tokens", 0),
            output_tokens=usage.get("completion_tokens", 0),
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        resp = await self._client.post(path, json=body)
        resp.raise_for_status()
        return resp

    def _is_transient(self, exc: Exception) -> bool:
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            return status >= 500 or status == 429
        return isinstance(exc, (httpx.ConnectError, httpx.ReadTimeout))
