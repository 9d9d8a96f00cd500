"""Agent-scaffold builder: creates a new repository seeded with a README."""

from __future__ import annotations

import time
from typing import Callable

from linda.config import GitHubConfig
from linda.integrations.github import CommittedFile, GitHubClient
from linda.utils.logging import get_logger

log = get_logger(__name__)

REPO_DESCRIPTION = "Generated agent scaffold from Linda"
SCAFFOLD_PATH = "README.md"
SCAFFOLD_COMMIT_MESSAGE = "chore: initial agent scaffold"


def scaffold_repo_name(now: float) -> str:
    return f"agent-{int(now * 1000)}"


def render_scaffold(repo_name: str, summary: str) -> str:
    return f"# {repo_name}\n\nGenerated by Linda. Summary: {summary}\n"


class AgentScaffoldBuilder:
    """Creates a private repository and commits a README describing the request.

    The steps run in order with no compensation: if the commit fails after
    the repository was created, the empty repository is left in place.
    """

    def __init__(
        self,
        config: GitHubConfig,
        github: GitHubClient,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._github = github
        self._clock = clock

    async def build(self, summary: str) -> str:
        if not self._config.token:
            return "Missing GitHub token"
        if not self._config.owner:
            return "Missing GitHub owner"

        name = scaffold_repo_name(self._clock())
        repo = await self._github.create_repository(
            name,
            description=REPO_DESCRIPTION,
            private=True,
            org=self._config.owner if self._config.owner_is_org else None,
        )
        log.info("scaffold_repository_created", repository=repo.full_name)

        await self._github.commit_file(
            repo.owner,
            repo.name,
            CommittedFile(
                path=SCAFFOLD_PATH,
                message=SCAFFOLD_COMMIT_MESSAGE,
                content=render_scaffold(repo.name, summary),
                branch=repo.default_branch,
            ),
        )
        return f"Created new agent repository: {repo.full_name}"
