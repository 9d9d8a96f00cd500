"""Webhook envelope and the typed GitHub events parsed out of it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class WebhookEnvelope:
    event_type: str
    payload: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PushEvent:
    repository: str | None
    commit_messages: tuple[str, ...] = ()


@dataclass(frozen=True)
class IssuesEvent:
    title: str = ""
    body: str = ""


@dataclass(frozen=True)
class IssueCommentEvent:
    body: str = ""


@dataclass(frozen=True)
class UnrecognizedEvent:
    event_type: str
    payload: Mapping[str, Any] = field(default_factory=dict)


GitHubEvent = Union[PushEvent, IssuesEvent, IssueCommentEvent, UnrecognizedEvent]


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_event(event_type: str, payload: Any) -> GitHubEvent:
    """Parse a raw payload into a typed event.

    Absent or malformed nested structure collapses to empty values; this
    function never raises.
    """
    data = _mapping(payload)

    if event_type == "push":
        full_name = _mapping(data.get("repository")).get("full_name")
        commits = data.get("commits")
        if not isinstance(commits, list):
            commits = []
        return PushEvent(
            repository=full_name if isinstance(full_name, str) else None,
            commit_messages=tuple(_text(_mapping(c).get("message")) for c in commits),
        )

    if event_type == "issues":
        issue = _mapping(data.get("issue"))
        return IssuesEvent(title=_text(issue.get("title")), body=_text(issue.get("body")))

    if event_type == "issue_comment":
        comment = _mapping(data.get("comment"))
        return IssueCommentEvent(body=_text(comment.get("body")))

    return UnrecognizedEvent(event_type=event_type, payload=data)
