"""Tests for the GitHub client commit sequence and the agent-scaffold builder."""

import json

import httpx
import pytest

from linda.config import GitHubConfig
from linda.core.scaffold import AgentScaffoldBuilder, render_scaffold, scaffold_repo_name
from linda.integrations.github import CommittedFile, GitHubAPIError, GitHubClient


class FakeGitHub:
    """Records requests and answers the repos and git-data endpoints."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.requests: list[tuple[str, str, dict]] = []
        self.fail_on = fail_on

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}
        path = request.url.path
        self.requests.append((request.method, path, body))

        if self.fail_on and self.fail_on in path:
            return httpx.Response(500, json={"message": "boom"})

        if path in ("/user/repos", "/orgs/acme/repos"):
            owner = "acme" if path.startswith("/orgs") else "me"
            return httpx.Response(201, json={
                "name": body["name"],
                "owner": {"login": owner},
                "default_branch": "main",
            })
        if "/git/ref/heads/" in path:
            return httpx.Response(200, json={"object": {"sha": "parent-sha"}})
        if "/git/commits/parent-sha" in path:
            return httpx.Response(200, json={"sha": "parent-sha", "tree": {"sha": "base-tree"}})
        if path.endswith("/git/blobs"):
            return httpx.Response(201, json={"sha": "blob-sha"})
        if path.endswith("/git/trees"):
            return httpx.Response(201, json={"sha": "tree-sha"})
        if path.endswith("/git/commits"):
            return httpx.Response(201, json={"sha": "commit-sha"})
        if "/git/refs/heads/" in path:
            return httpx.Response(200, json={"object": {"sha": body["sha"]}})
        return httpx.Response(404, json={"message": "Not Found"})

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(method, path) for method, path, _ in self.requests]


@pytest.fixture
def config():
    return GitHubConfig(token="ghp_test", owner="me")


def _client(config, fake):
    return GitHubClient(config, transport=httpx.MockTransport(fake))


class TestCommitFile:
    async def test_full_sequence(self, config):
        fake = FakeGitHub()
        client = _client(config, fake)

        sha = await client.commit_file(
            "me", "repo", CommittedFile(path="README.md", message="msg", content="hello", branch="main")
        )

        assert sha == "commit-sha"
        assert fake.calls == [
            ("GET", "/repos/me/repo/git/ref/heads/main"),
            ("GET", "/repos/me/repo/git/commits/parent-sha"),
            ("POST", "/repos/me/repo/git/blobs"),
            ("POST", "/repos/me/repo/git/trees"),
            ("POST", "/repos/me/repo/git/commits"),
            ("PATCH", "/repos/me/repo/git/refs/heads/main"),
        ]
        _, _, tree = fake.requests[3]
        assert tree == {
            "base_tree": "base-tree",
            "tree": [{"path": "README.md", "mode": "100644", "type": "blob", "sha": "blob-sha"}],
        }
        _, _, commit = fake.requests[4]
        assert commit == {"message": "msg", "tree": "tree-sha", "parents": ["parent-sha"]}
        await client.close()

    async def test_failure_before_ref_update_leaves_ref_alone(self, config):
        fake = FakeGitHub(fail_on="/git/trees")
        client = _client(config, fake)

        with pytest.raises(GitHubAPIError) as exc_info:
            await client.commit_file("me", "repo", CommittedFile("a.txt", "m", "c"))

        assert exc_info.value.status_code == 500
        assert all(method != "PATCH" for method, _ in fake.calls)
        await client.close()

    async def test_sends_auth_headers(self, config):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(201, json={"name": "x", "owner": {"login": "me"}})

        client = GitHubClient(config, transport=httpx.MockTransport(handler))
        repo = await client.create_repository("x", description="d")

        assert seen["authorization"] == "Bearer ghp_test"
        assert seen["accept"] == "application/vnd.github+json"
        assert repo.default_branch == "main"
        await client.close()


class TestAgentScaffoldBuilder:
    async def test_missing_token_makes_no_calls(self):
        fake = FakeGitHub()
        config = GitHubConfig(owner="me")
        builder = AgentScaffoldBuilder(config, _client(config, fake))

        assert await builder.build("build an agent") == "Missing GitHub token"
        assert fake.requests == []

    async def test_missing_owner_makes_no_calls(self):
        fake = FakeGitHub()
        config = GitHubConfig(token="t")
        builder = AgentScaffoldBuilder(config, _client(config, fake))

        assert await builder.build("build an agent") == "Missing GitHub owner"
        assert fake.requests == []

    async def test_creates_repo_and_commits_readme(self, config):
        fake = FakeGitHub()
        builder = AgentScaffoldBuilder(config, _client(config, fake), clock=lambda: 1700000000.0)

        result = await builder.build("Issue: Build an agent for metrics")

        assert result == "Created new agent repository: me/agent-1700000000000"
        method, path, repo_body = fake.requests[0]
        assert (method, path) == ("POST", "/user/repos")
        assert repo_body == {
            "name": "agent-1700000000000",
            "description": "Generated agent scaffold from Linda",
            "private": True,
            "auto_init": True,
        }
        _, _, blob = fake.requests[3]
        assert blob["content"] == (
            "# agent-1700000000000\n\nGenerated by Linda. Summary: Issue: Build an agent for metrics\n"
        )
        assert fake.calls[-1] == ("PATCH", "/repos/me/agent-1700000000000/git/refs/heads/main")

    async def test_org_owner(self):
        fake = FakeGitHub()
        config = GitHubConfig(token="t", owner="acme", owner_is_org=True)
        builder = AgentScaffoldBuilder(config, _client(config, fake), clock=lambda: 1.0)

        result = await builder.build("build an agent")

        assert fake.calls[0] == ("POST", "/orgs/acme/repos")
        assert result == "Created new agent repository: acme/agent-1000"

    async def test_repo_creation_failure_aborts(self, config):
        fake = FakeGitHub(fail_on="/user/repos")
        builder = AgentScaffoldBuilder(config, _client(config, fake))

        with pytest.raises(GitHubAPIError):
            await builder.build("build an agent")

        assert len(fake.requests) == 1


class TestScaffoldHelpers:
    def test_repo_name_has_millisecond_resolution(self):
        assert scaffold_repo_name(1.001) != scaffold_repo_name(1.002)
        assert scaffold_repo_name(1700000000.5) == "agent-1700000000500"

    def test_render_scaffold(self):
        assert render_scaffold("agent-1", "s") == "# agent-1\n\nGenerated by Linda. Summary: s\n"
