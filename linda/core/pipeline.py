"""Webhook pipeline: summarize → classify → log → dispatch → notify."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from linda.core.activity_log import ActivityLogger
from linda.core.decision import Action, decide_action
from linda.core.executor import FixFeatureExecutor
from linda.core.notifier import Notifier
from linda.core.scaffold import AgentScaffoldBuilder
from linda.utils.logging import get_logger
from linda.webhooks.handlers import summarize_event
from linda.webhooks.models import WebhookEnvelope

log = get_logger(__name__)


class DispatchError(Exception):
    """The executor or scaffold builder failed for this request."""

    def __init__(self, action: Action, summary: str, reason: str) -> None:
        self.action = action
        self.summary = summary
        self.reason = reason
        super().__init__(f"Dispatch failed: {reason}")


@dataclass(frozen=True)
class PipelineOutcome:
    action: Action
    summary: str
    result: str
    notification: str


class WebhookPipeline:
    """Runs one verified webhook through every stage, strictly in order.

    Logging and notification failures are isolated inside their components.
    Executor and builder failures (including the dispatch timeout) become
    ``DispatchError`` after a failure notification has been attempted.
    """

    def __init__(
        self,
        activity_log: ActivityLogger,
        executor: FixFeatureExecutor,
        builder: AgentScaffoldBuilder,
        notifier: Notifier,
        dispatch_timeout: float = 120.0,
        dry_run: bool = False,
    ) -> None:
        self._activity_log = activity_log
        self._executor = executor
        self._builder = builder
        self._notifier = notifier
        self._dispatch_timeout = dispatch_timeout
        self._dry_run = dry_run

    async def handle(self, envelope: WebhookEnvelope) -> PipelineOutcome:
        summary = summarize_event(envelope.event_type, envelope.payload)
        action = decide_action(summary)
        log.info("webhook_classified", event_type=envelope.event_type, action=action.value)

        await self._activity_log.record(envelope.event_type, action, summary)

        try:
            result = await asyncio.wait_for(
                self._dispatch(action, summary), timeout=self._dispatch_timeout
            )
        except asyncio.TimeoutError as e:
            reason = f"timed out after {self._dispatch_timeout:g}s"
            await self._fail(action, summary, reason)
            raise DispatchError(action, summary, reason) from e
        except Exception as e:
            reason = str(e) or type(e).__name__
            await self._fail(action, summary, reason)
            raise DispatchError(action, summary, reason) from e

        notification = await self._notifier.notify(action, summary, result)
        log.info("webhook_dispatched", action=action.value, notification=notification)
        return PipelineOutcome(action, summary, result, notification)

    async def _dispatch(self, action: Action, summary: str) -> str:
        if self._dry_run:
            return f"[DRY RUN] Would {action.value}: {summary[:100]}"
        if action is Action.BUILD_AGENT:
            return await self._builder.build(summary)
        return await self._executor.run(summary)

    async def _fail(self, action: Action, summary: str, reason: str) -> None:
        log.exception("dispatch_failed", action=action.value, reason=reason)
        await self._notifier.notify(action, summary, reason, failed=True)
