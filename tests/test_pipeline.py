"""Tests for the webhook pipeline orchestration."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from linda.core.decision import Action
from linda.core.pipeline import DispatchError, WebhookPipeline
from linda.integrations.github import GitHubAPIError
from linda.webhooks.models import WebhookEnvelope


@pytest.fixture
def activity_log():
    return AsyncMock()


@pytest.fixture
def executor():
    mock = AsyncMock()
    mock.run.return_value = "Add a null check in startup()"
    return mock


@pytest.fixture
def builder():
    mock = AsyncMock()
    mock.build.return_value = "Created new agent repository: me/agent-1700000000000"
    return mock


@pytest.fixture
def notifier():
    mock = AsyncMock()
    mock.notify.return_value = "Telegram notification sent"
    return mock


@pytest.fixture
def pipeline(activity_log, executor, builder, notifier):
    return WebhookPipeline(activity_log, executor, builder, notifier)


class TestWebhookPipeline:
    async def test_build_request_goes_to_builder(self, pipeline, activity_log, executor, builder, notifier):
        envelope = WebhookEnvelope("issues", {"issue": {"title": "Build an agent", "body": "for metrics"}})

        outcome = await pipeline.handle(envelope)

        assert outcome.summary == "Issue: Build an agent for metrics"
        assert outcome.action is Action.BUILD_AGENT
        assert outcome.result == "Created new agent repository: me/agent-1700000000000"
        builder.build.assert_awaited_once_with("Issue: Build an agent for metrics")
        executor.run.assert_not_awaited()
        activity_log.record.assert_awaited_once_with(
            "issues", Action.BUILD_AGENT, "Issue: Build an agent for metrics"
        )
        notifier.notify.assert_awaited_once_with(
            Action.BUILD_AGENT, "Issue: Build an agent for metrics", outcome.result
        )

    async def test_fix_request_goes_to_executor(self, pipeline, executor, builder):
        envelope = WebhookEnvelope("issue_comment", {"comment": {"body": "please fix the crash on startup"}})

        outcome = await pipeline.handle(envelope)

        assert outcome.action is Action.FIX_OR_FEATURE
        assert outcome.result == "Add a null check in startup()"
        assert outcome.notification == "Telegram notification sent"
        executor.run.assert_awaited_once_with("Issue comment: please fix the crash on startup")
        builder.build.assert_not_awaited()

    async def test_unknown_event_still_dispatches(self, pipeline, executor):
        outcome = await pipeline.handle(WebhookEnvelope("star", {}))
        assert outcome.summary == "Unhandled event star"
        executor.run.assert_awaited_once_with("Unhandled event star")

    async def test_stages_run_in_order(self, activity_log, executor, builder, notifier):
        order = []
        activity_log.record.side_effect = lambda *a: order.append("log")
        executor.run.side_effect = lambda *a: order.append("dispatch") or "done"
        notifier.notify.side_effect = lambda *a, **kw: order.append("notify") or "sent"
        pipeline = WebhookPipeline(activity_log, executor, builder, notifier)

        await pipeline.handle(WebhookEnvelope("push", {}))

        assert order == ["log", "dispatch", "notify"]

    async def test_executor_failure_raises_dispatch_error(self, pipeline, executor, notifier):
        executor.run.side_effect = RuntimeError("rate limited")

        with pytest.raises(DispatchError) as exc_info:
            await pipeline.handle(WebhookEnvelope("issue_comment", {"comment": {"body": "fix"}}))

        assert exc_info.value.reason == "rate limited"
        assert str(exc_info.value) == "Dispatch failed: rate limited"
        notifier.notify.assert_awaited_once_with(
            Action.FIX_OR_FEATURE, "Issue comment: fix", "rate limited", failed=True
        )

    async def test_builder_failure_raises_dispatch_error(self, pipeline, builder):
        builder.build.side_effect = GitHubAPIError("GitHub POST /user/repos failed with 422", status_code=422)

        with pytest.raises(DispatchError) as exc_info:
            await pipeline.handle(WebhookEnvelope("issues", {"issue": {"title": "generate a new agent"}}))

        assert exc_info.value.action is Action.BUILD_AGENT
        assert "422" in exc_info.value.reason

    async def test_dispatch_timeout(self, activity_log, executor, builder, notifier):
        async def slow(summary):
            await asyncio.sleep(5)

        executor.run.side_effect = slow
        pipeline = WebhookPipeline(activity_log, executor, builder, notifier, dispatch_timeout=0.01)

        with pytest.raises(DispatchError) as exc_info:
            await pipeline.handle(WebhookEnvelope("push", {}))

        assert "timed out" in exc_info.value.reason

    async def test_configuration_error_string_is_a_result(self, pipeline, builder):
        builder.build.return_value = "Missing GitHub token"
        outcome = await pipeline.handle(WebhookEnvelope("issues", {"issue": {"title": "build an agent"}}))
        assert outcome.result == "Missing GitHub token"

    async def test_dry_run_skips_dispatch(self, activity_log, executor, builder, notifier):
        pipeline = WebhookPipeline(activity_log, executor, builder, notifier, dry_run=True)

        outcome = await pipeline.handle(WebhookEnvelope("issues", {"issue": {"title": "build an agent"}}))

        assert outcome.result == "[DRY RUN] Would build-agent: Issue: build an agent"
        builder.build.assert_not_awaited()
        executor.run.assert_not_awaited()
        activity_log.record.assert_awaited_once()
        notifier.notify.assert_awaited_once()
