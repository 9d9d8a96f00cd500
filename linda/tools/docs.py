"""Read a Google Doc as plain text."""

from __future__ import annotations

from typing import Any

import httpx

from linda.integrations.google import GoogleAPIError, GoogleConfigError, GoogleWorkspaceClient
from linda.tools.base import BaseTool, ToolResult


class ReadDocTool(BaseTool):
    def __init__(self, google: GoogleWorkspaceClient, char_limit: int = 8000) -> None:
        self._google = google
        self._char_limit = char_limit

    @property
    def name(self) -> str:
        return "read_google_doc"

    @property
    def description(self) -> str:
        return "Read a Google Doc by ID and return its plain text contents."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "document_id": {"type": "string", "description": "Google Doc ID."},
            },
            "required": ["document_id"],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        document_id: str = kwargs["document_id"]

        if not self._google.configured:
            return ToolResult(success=False, error="Missing Google client email or private key")

        try:
            text = await self._google.read_document(document_id)
        except (GoogleAPIError, GoogleConfigError, httpx.HTTPError) as e:
            return ToolResult(success=False, error=str(e))

        return ToolResult(
            success=True,
            output=text[: self._char_limit],
            data={"truncated": len(text) > self._char_limit},
        )
