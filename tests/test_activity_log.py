"""Tests for the spreadsheet activity log."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from linda.config import GoogleConfig
from linda.core.activity_log import ActivityLogger, LogRecord
from linda.core.decision import Action
from linda.integrations.google import GoogleAPIError


@pytest.fixture
def google():
    return AsyncMock()


class TestActivityLogger:
    async def test_no_spreadsheet_is_silent_noop(self, google):
        logger = ActivityLogger(GoogleConfig(), google)
        record = await logger.record("push", Action.FIX_OR_FEATURE, "Push to o/r: x")
        assert record is None
        google.append_rows.assert_not_awaited()

    async def test_appends_one_row(self, google):
        logger = ActivityLogger(GoogleConfig(spreadsheet_id="sheet-1"), google)
        now = datetime(2024, 5, 1, 12, 30, 0, 123456, tzinfo=timezone.utc)

        record = await logger.record("issues", Action.BUILD_AGENT, "Issue: build an agent", now=now)

        assert record == LogRecord(
            "2024-05-01T12:30:00.123Z", "issues", Action.BUILD_AGENT, "Issue: build an agent"
        )
        google.append_rows.assert_awaited_once_with(
            "sheet-1",
            "Logs!A:D",
            [["2024-05-01T12:30:00.123Z", "issues", "build-agent", "Issue: build an agent"]],
        )

    async def test_custom_range(self, google):
        logger = ActivityLogger(GoogleConfig(spreadsheet_id="s", sheet_range="Audit!A:D"), google)
        await logger.record("push", Action.FIX_OR_FEATURE, "x")
        assert google.append_rows.await_args.args[1] == "Audit!A:D"

    async def test_timestamp_normalized_to_utc(self, google):
        logger = ActivityLogger(GoogleConfig(spreadsheet_id="s"), google)
        local = datetime(2024, 5, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        record = await logger.record("push", Action.FIX_OR_FEATURE, "x", now=local)
        assert record.timestamp == "2024-05-01T12:00:00.000Z"

    @pytest.mark.parametrize("error", [GoogleAPIError("403", status_code=403), ConnectionError("down")])
    async def test_append_failure_is_swallowed(self, google, error):
        google.append_rows.side_effect = error
        logger = ActivityLogger(GoogleConfig(spreadsheet_id="s"), google)

        record = await logger.record("push", Action.FIX_OR_FEATURE, "x")

        assert record is not None
        google.append_rows.assert_awaited_once()
