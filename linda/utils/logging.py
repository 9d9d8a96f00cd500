"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import re
import sys

import structlog


# Fields that never reach a log line, whatever their value
_REDACTED_KEYS = frozenset({"secret", "signature", "private_key", "api_key", "bot_token", "token"})

# Credentials embedded inside otherwise useful strings (URLs, error messages)
_SENSITIVE_PATTERNS = [
    re.compile(r"(token|key|secret|password|authorization)[\"']?\s*[:=]\s*[\"']?[\w\-\.]+", re.IGNORECASE),
    re.compile(r"(bearer)\s+[\w\-\.]+", re.IGNORECASE),
    re.compile(r"(/bot)\d+:[\w\-]+"),
]

_NOISY_LOGGERS = ("httpx", "httpcore", "anthropic", "aiohttp.access", "google.auth", "urllib3")


def _redact(
    _logger: structlog.types.WrappedLogger,
    _method: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    for key, value in list(event_dict.items()):
        if key in _REDACTED_KEYS:
            event_dict[key] = "***REDACTED***"
        elif isinstance(value, str):
            for pattern in _SENSITIVE_PATTERNS:
                value = pattern.sub(r"\1=***REDACTED***", value)
            event_dict[key] = value
    return event_dict


def _formatter(json_output: bool) -> structlog.stdlib.ProcessorFormatter:
    tail: list[structlog.types.Processor]
    if json_output:
        tail = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # ConsoleRenderer prints tracebacks itself
        tail = [structlog.dev.ConsoleRenderer()]
    return structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *tail],
    )


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Anything bound with ``structlog.contextvars`` (the webhook server binds
    the delivery id and event type) is merged into every line.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if numeric_level <= logging.DEBUG:
        print(
            "WARNING: DEBUG logging is enabled. Webhook summaries and model "
            "output may appear in logs.",
            file=sys.stderr,
        )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            _redact,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(json_output))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
