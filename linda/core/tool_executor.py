"""Tool-use loop for the fix/feature executor."""

from __future__ import annotations

from typing import Any

from linda.core.llm import LLMMessage, LLMProvider, LLMResponse, ToolCall
from linda.tools.base import BaseTool, ToolResult
from linda.utils.logging import get_logger

log = get_logger(__name__)


def _assistant_turn(response: LLMResponse) -> LLMMessage:
    blocks: list[dict[str, Any]] = []
    if response.content:
        blocks.append({"type": "text", "text": response.content})
    blocks.extend(
        {"type": "tool_use", "id": tc.id, "name": tc.name, "input": tc.arguments}
        for tc in response.tool_calls
    )
    return LLMMessage(role="assistant", content=blocks)


def _result_block(call: ToolCall, result: ToolResult) -> dict[str, Any]:
    return {
        "type": "tool_result",
        "tool_use_id": call.id,
        "content": result.output if result.success else f"Error: {result.error}",
        "is_error": not result.success,
    }


class ToolExecutor:
    """Lets the model call the workspace tools until it answers in plain text.

    The loop is bounded by ``max_iterations`` model calls; when the bound is
    hit, the last text the model produced is returned.
    """

    def __init__(self, llm: LLMProvider, tools: list[BaseTool], max_iterations: int = 6) -> None:
        self._llm = llm
        self._tool_map = {t.name: t for t in tools}
        self._max_iterations = max_iterations

    @property
    def tools(self) -> list[BaseTool]:
        return list(self._tool_map.values())

    async def run(self, messages: list[LLMMessage], system: str) -> str:
        conversation = list(messages)
        schemas = [t.to_anthropic_schema() for t in self._tool_map.values()] or None
        response: LLMResponse | None = None

        for _ in range(self._max_iterations):
            response = await self._llm.complete(messages=conversation, system=system, tools=schemas)
            if not response.wants_tools:
                return response.content

            conversation.append(_assistant_turn(response))
            results = [
                _result_block(call, await self._invoke(call)) for call in response.tool_calls
            ]
            conversation.append(LLMMessage.user(results))

        log.warning("tool_loop_exhausted", iterations=self._max_iterations)
        return response.content if response else ""

    async def _invoke(self, call: ToolCall) -> ToolResult:
        tool = self._tool_map.get(call.name)
        if tool is None:
            return ToolResult(success=False, error=f"Unknown tool '{call.name}'")

        log.info("tool_executing", tool=call.name)
        try:
            return await tool.execute(**call.arguments)
        except KeyError as e:
            # Model omitted a required argument
            return ToolResult(success=False, error=f"Missing argument: {e}")
