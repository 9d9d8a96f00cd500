"""Webhook signature validation and event summarization."""

from __future__ import annotations

import hashlib
import hmac
from typing import Any

from linda.webhooks.models import (
    IssueCommentEvent,
    IssuesEvent,
    PushEvent,
    parse_event,
)

_SIGNATURE_PREFIX = "sha256="


# ---------------------------------------------------------------------------
# Signature validation
# ---------------------------------------------------------------------------

def validate_github_signature(body: bytes, signature: str | None, secret: str | None) -> bool:
    """Validate GitHub webhook HMAC-SHA256 signature over the raw body.

    Returns False if no secret is configured, the header is missing, or the
    header is not of the form ``sha256=<hex>``.
    """
    if not secret:
        return False
    if not signature or not signature.startswith(_SIGNATURE_PREFIX):
        return False
    expected = _SIGNATURE_PREFIX + hmac.new(
        secret.encode(), body, hashlib.sha256
    ).hexdigest()
    # compare_digest rejects non-ASCII str, so compare bytes
    return hmac.compare_digest(
        expected.encode(), signature.encode("utf-8", errors="replace")
    )


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

def summarize_event(event_type: str, payload: Any) -> str:
    """Distill a webhook envelope into a one-line summary."""
    event = parse_event(event_type, payload)

    if isinstance(event, PushEvent):
        repo = event.repository if event.repository is not None else "unknown"
        return f"Push to {repo}: {' | '.join(event.commit_messages)}"

    if isinstance(event, IssuesEvent):
        return f"Issue: {event.title} {event.body}".strip()

    if isinstance(event, IssueCommentEvent):
        return f"Issue comment: {event.body}".strip()

    return f"Unhandled event {event_type}"
