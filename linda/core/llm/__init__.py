"""LLM provider subpackage."""

from linda.config import LLMConfig
from linda.core.llm.anthropic import AnthropicProvider
from linda.core.llm.base import LLMProvider
from linda.core.llm.openai import OpenAIProvider
from linda.core.llm.types import LLMMessage, LLMResponse, ToolCall

__all__ = [
    "LLMMessage",
    "LLMResponse",
    "ToolCall",
    "LLMProvider",
    "AnthropicProvider",
    "OpenAIProvider",
    "create_provider",
]


def create_provider(config: LLMConfig) -> LLMProvider:
    """Factory to create the appropriate LLM provider from config."""
    if config.provider == "anthropic":
        return AnthropicProvider(config)
    return OpenAIProvider(config)
