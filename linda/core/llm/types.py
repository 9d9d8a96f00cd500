"""Provider-neutral message and response types.

Content blocks follow the Anthropic shape (``text``, ``tool_use``,
``tool_result``); the OpenAI provider converts them on the way out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LLMMessage:
    role: str  # "user" or "assistant"
    content: str | list[dict[str, Any]]

    @classmethod
    def user(cls, content: str | list[dict[str, Any]]) -> LLMMessage:
        return cls(role="user", content=content)


@dataclass
class ToolCall:
    id: str
    name: str
    arguments: dict[str, Any]


@dataclass
class LLMResponse:
    content: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)
    stop_reason: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def wants_tools(self) -> bool:
        return bool(self.tool_calls)
