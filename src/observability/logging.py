"""
Structured logging configuration using structlog.

Console output during development, one JSON object per line in
production. Every record passes through ``redact_secrets`` so GitHub
tokens and LLM API keys never reach the log sink, and
``bind_repository`` tags the records of one fetch or generation with the
repository it concerns.
"""

import logging
import re
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from src.config.settings import get_settings

REDACTED = "[REDACTED]"

# Event keys whose values are always secrets
SECRET_KEYS = frozenset({"token", "github_token", "api_key", "authorization"})

# GitHub classic/fine-grained tokens, OpenAI and Anthropic keys
_SECRET_PATTERN = re.compile(
    r"\b(?:gh[pousr]_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,}|sk-(?:ant-)?[A-Za-z0-9_-]{16,})"
)


def redact_secrets(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask credential values and credential-looking substrings."""
    for key, value in event_dict.items():
        if key.lower() in SECRET_KEYS and value is not None:
            event_dict[key] = REDACTED
        elif isinstance(value, str):
            event_dict[key] = _SECRET_PATTERN.sub(REDACTED, value)
    return event_dict


def setup_logging(log_level: str | None = None) -> None:
    """
    Configure structured logging for the CLI and the API server.

    Args:
        log_level: Overrides ``LOG_LEVEL`` from settings when given.

    Usage:
        setup_logging()
        logger = structlog.get_logger()
        logger.info("Fetched activity", owner="octocat", repo="hello-world", count=42)
    """
    settings = get_settings()
    level = (log_level or settings.log_level).upper()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        redact_secrets,
    ]

    if settings.is_production:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdout carries CLI output; logs go to stderr
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
    )

    for noisy in ("httpx", "httpcore", "openai", "anthropic", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def bind_repository(owner: str, repo: str, **extra: Any) -> None:
    """Tag subsequent log records with ``repository=owner/repo``."""
    structlog.contextvars.bind_contextvars(repository=f"{owner}/{repo}", **extra)
