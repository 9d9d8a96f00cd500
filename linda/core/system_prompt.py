"""Persona and prompt construction for the fix/feature executor."""

from __future__ import annotations

from linda.tools.base import BaseTool


_BASE_PROMPT = """\
You are Linda, an Elite Senior Developer Assistant and autonomous co-worker.
You analyze GitHub events, fix bugs, implement features, and can scaffold new AI agents.
If the user explicitly asks to "build an agent" or "generate a new agent", you must create \
a new agent codebase and push it to a new repository.

Guidelines:
- Name the concrete next step a developer should take, then the reasoning behind it.
- Point at files, functions, or commands when the event gives you enough to do so.
- Say what information is missing when the event is too thin to act on.
"""


def build_system_prompt(tools: list[BaseTool] | None = None) -> str:
    """Build the system prompt, listing tools when the tool loop is enabled."""
    parts = [_BASE_PROMPT]

    if tools:
        parts.append("Available tools:")
        for tool in tools:
            parts.append(f"- **{tool.name}**: {tool.description}")

    return "\n".join(parts)


def build_user_prompt(summary: str) -> str:
    return f"Webhook summary: {summary}\nDecide the next developer action."
