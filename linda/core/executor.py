"""Fix/feature executor: asks the reasoning backend for the next developer action."""

from __future__ import annotations

from linda.config import LLMConfig
from linda.core.llm import LLMMessage, LLMProvider
from linda.core.system_prompt import build_system_prompt, build_user_prompt
from linda.core.tool_executor import ToolExecutor
from linda.utils.logging import get_logger

log = get_logger(__name__)


class FixFeatureExecutor:
    def __init__(
        self,
        config: LLMConfig,
        llm: LLMProvider,
        tool_executor: ToolExecutor | None = None,
    ) -> None:
        self._config = config
        self._llm = llm
        self._tool_executor = tool_executor

    async def run(self, summary: str) -> str:
        """Return the backend's reply verbatim. Backend errors propagate."""
        if self._config.requires_api_key and not self._config.api_key:
            return "Missing LLM API key"

        messages = [LLMMessage.user(build_user_prompt(summary))]

        if self._tool_executor is not None:
            system = build_system_prompt(self._tool_executor.tools)
            return await self._tool_executor.run(messages, system)

        response = await self._llm.complete(messages=messages, system=build_system_prompt())
        log.info(
            "executor_completed",
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
        )
        return response.content
