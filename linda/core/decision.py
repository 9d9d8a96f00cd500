"""Dispatch decision between building a new agent and fixing/implementing."""

from __future__ import annotations

from enum import Enum


class Action(str, Enum):
    BUILD_AGENT = "build-agent"
    FIX_OR_FEATURE = "fix-or-feature"

    def __str__(self) -> str:
        return self.value


_BUILD_PHRASES = ("build an agent", "generate a new agent")


def decide_action(summary: str) -> Action:
    lowered = summary.lower()
    if any(phrase in lowered for phrase in _BUILD_PHRASES):
        return Action.BUILD_AGENT
    return Action.FIX_OR_FEATURE
