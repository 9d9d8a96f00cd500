"""GitHub webhook intake."""

from linda.webhooks.handlers import summarize_event, validate_github_signature
from linda.webhooks.models import WebhookEnvelope, parse_event

__all__ = [
    "WebhookEnvelope",
    "parse_event",
    "summarize_event",
    "validate_github_signature",
]
