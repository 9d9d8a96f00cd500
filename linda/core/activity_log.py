"""Append-only activity log of every webhook decision, kept in a spreadsheet."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from linda.config import GoogleConfig
from linda.core.decision import Action
from linda.integrations.google import GoogleWorkspaceClient
from linda.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class LogRecord:
    timestamp: str
    event_type: str
    action: Action
    summary: str

    def as_row(self) -> list[str]:
        return [self.timestamp, self.event_type, self.action.value, self.summary]


def _utc_timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ActivityLogger:
    """Records one row per webhook.

    Without a spreadsheet id this is a no-op. Append failures are logged and
    dropped so they never hold up dispatch.
    """

    def __init__(self, config: GoogleConfig, google: GoogleWorkspaceClient) -> None:
        self._config = config
        self._google = google

    async def record(
        self, event_type: str, action: Action, summary: str, now: datetime | None = None
    ) -> LogRecord | None:
        if not self._config.spreadsheet_id:
            return None

        record = LogRecord(_utc_timestamp(now), event_type, action, summary)
        try:
            await self._google.append_rows(
                self._config.spreadsheet_id, self._config.sheet_range, [record.as_row()]
            )
        except Exception:
            log.exception(
                "activity_log_failed",
                spreadsheet_id=self._config.spreadsheet_id,
                event_type=event_type,
            )
        return record
