"""Append rows to a Google Sheet."""

from __future__ import annotations

from typing import Any

import httpx

from linda.integrations.google import GoogleAPIError, GoogleConfigError, GoogleWorkspaceClient
from linda.tools.base import BaseTool, ToolResult
from linda.utils.logging import get_logger

log = get_logger(__name__)


class SheetAppendTool(BaseTool):
    def __init__(self, google: GoogleWorkspaceClient) -> None:
        self._google = google

    @property
    def name(self) -> str:
        return "write_to_google_sheet"

    @property
    def description(self) -> str:
        return "Append a row of values to a range of a Google Sheet."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "spreadsheet_id": {"type": "string", "description": "Spreadsheet ID."},
                "range": {"type": "string", "description": "Target range, e.g. 'Logs!A:D'."},
                "values": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Cell values for the new row.",
                },
            },
            "required": ["spreadsheet_id", "range", "values"],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        spreadsheet_id: str = kwargs["spreadsheet_id"]
        sheet_range: str = kwargs["range"]
        values = [str(v) for v in kwargs["values"]]

        if not self._google.configured:
            return ToolResult(success=False, error="Missing Google client email or private key")

        try:
            await self._google.append_rows(spreadsheet_id, sheet_range, [values])
        except (GoogleAPIError, GoogleConfigError, httpx.HTTPError) as e:
            log.warning("sheet_append_failed", error=str(e))
            return ToolResult(success=False, error=str(e))
        return ToolResult(success=True, output="Sheet updated")
