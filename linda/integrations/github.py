"""Async GitHub REST client for repository creation and single-file commits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from linda.config import GitHubConfig
from linda.utils.logging import get_logger

log = get_logger(__name__)


class GitHubAPIError(Exception):
    """Raised when a GitHub API request returns a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        request_url: str | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        self.request_url = request_url
        super().__init__(message)


@dataclass(frozen=True)
class RepositoryHandle:
    owner: str
    name: str
    default_branch: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class CommittedFile:
    path: str
    message: str
    content: str
    branch: str = "main"


class GitHubClient:
    """Thin wrapper over the repos and git-data endpoints.

    Requests are not retried; any non-2xx response raises ``GitHubAPIError``.
    """

    def __init__(
        self,
        config: GitHubConfig,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {config.token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "linda-agent",
            },
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self, method: str, path: str, json_data: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        response = await self._client.request(method, path, json=json_data)
        if response.is_error:
            raise GitHubAPIError(
                f"GitHub {method} {path} failed with {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
                request_url=str(response.request.url),
            )
        return response.json()

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    async def create_repository(
        self,
        name: str,
        description: str,
        private: bool = True,
        org: str | None = None,
    ) -> RepositoryHandle:
        """Create a repository for the authenticated user, or under ``org``.

        ``auto_init`` seeds an initial commit so the default branch ref exists
        for the commit sequence that follows.
        """
        path = f"/orgs/{org}/repos" if org else "/user/repos"
        data = await self._request("POST", path, {
            "name": name,
            "description": description,
            "private": private,
            "auto_init": True,
        })
        handle = RepositoryHandle(
            owner=data["owner"]["login"],
            name=data["name"],
            default_branch=data.get("default_branch") or self._config.default_branch,
        )
        log.info("github_repository_created", repository=handle.full_name)
        return handle

    # ------------------------------------------------------------------
    # Git data
    # ------------------------------------------------------------------

    async def commit_file(self, owner: str, repo: str, file: CommittedFile) -> str:
        """Commit one file on top of ``file.branch`` and return the commit sha.

        Runs read ref, read commit, create blob, create tree, create commit,
        update ref. Only the final call moves the branch.
        """
        base = f"/repos/{owner}/{repo}/git"
        ref = await self._request("GET", f"{base}/ref/heads/{file.branch}")
        parent_sha = ref["object"]["sha"]

        parent = await self._request("GET", f"{base}/commits/{parent_sha}")

        blob = await self._request("POST", f"{base}/blobs", {
            "content": file.content,
            "encoding": "utf-8",
        })

        tree = await self._request("POST", f"{base}/trees", {
            "base_tree": parent["tree"]["sha"],
            "tree": [
                {"path": file.path, "mode": "100644", "type": "blob", "sha": blob["sha"]},
            ],
        })

        commit = await self._request("POST", f"{base}/commits", {
            "message": file.message,
            "tree": tree["sha"],
            "parents": [parent_sha],
        })

        await self._request("PATCH", f"{base}/refs/heads/{file.branch}", {
            "sha": commit["sha"],
        })

        log.info(
            "github_file_committed",
            repository=f"{owner}/{repo}",
            path=file.path,
            branch=file.branch,
            sha=commit["sha"],
        )
        return commit["sha"]
