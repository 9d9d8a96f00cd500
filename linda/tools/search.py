"""Web search through the Tavily API."""

from __future__ import annotations

import json
from typing import Any

import httpx

from linda.config import SearchConfig
from linda.tools.base import BaseTool, ToolResult
from linda.utils.logging import get_logger

log = get_logger(__name__)


class WebSearchTool(BaseTool):
    def __init__(
        self,
        config: SearchConfig,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def name(self) -> str:
        return "search_internet"

    @property
    def description(self) -> str:
        return "Search the web for relevant documentation or examples."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query."},
            },
            "required": ["query"],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        query: str = kwargs["query"]

        if not self._config.api_key:
            return ToolResult(success=False, error="Missing Tavily API key")

        log.info("web_search", query=query)
        try:
            response = await self._client.post(
                self._config.endpoint,
                json={
                    "api_key": self._config.api_key,
                    "query": query,
                    "max_results": self._config.max_results,
                },
            )
        except httpx.HTTPError as e:
            return ToolResult(success=False, error=f"Search failed: {e}")

        if response.is_error:
            return ToolResult(success=False, error=f"Search failed: {response.status_code}")

        results = [
            {
                "url": r.get("url", ""),
                "title": r.get("title", ""),
                "content": r.get("content", ""),
            }
            for r in response.json().get("results") or []
        ]
        return ToolResult(success=True, output=json.dumps(results), data={"count": len(results)})

    async def cleanup(self) -> None:
        await self._client.aclose()
