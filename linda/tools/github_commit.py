"""Commit a single file to a GitHub repository."""

from __future__ import annotations

from typing import Any

import httpx

from linda.config import GitHubConfig
from linda.integrations.github import CommittedFile, GitHubAPIError, GitHubClient
from linda.tools.base import BaseTool, ToolResult


class CommitFileTool(BaseTool):
    def __init__(self, config: GitHubConfig, github: GitHubClient) -> None:
        self._config = config
        self._github = github

    @property
    def name(self) -> str:
        return "commit_file_to_github"

    @property
    def description(self) -> str:
        return "Commit a file to a GitHub repository using the GitHub API."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "owner": {"type": "string"},
                "repo": {"type": "string"},
                "path": {"type": "string", "description": "File path inside the repository."},
                "message": {"type": "string", "description": "Commit message."},
                "content": {"type": "string", "description": "Full file content."},
                "branch": {"type": "string", "default": self._config.default_branch},
            },
            "required": ["owner", "repo", "path", "message", "content"],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        owner: str = kwargs["owner"]
        repo: str = kwargs["repo"]
        file = CommittedFile(
            path=kwargs["path"],
            message=kwargs["message"],
            content=kwargs["content"],
            branch=kwargs.get("branch") or self._config.default_branch,
        )

        if not self._config.token:
            return ToolResult(success=False, error="Missing GitHub token")

        try:
            sha = await self._github.commit_file(owner, repo, file)
        except (GitHubAPIError, httpx.HTTPError) as e:
            return ToolResult(success=False, error=str(e))

        return ToolResult(
            success=True,
            output=f"Committed to {owner}/{repo}:{file.path}",
            data={"sha": sha},
        )
