"""Logging setup: plain or JSON output, request context and secret redaction."""

from __future__ import annotations

import json
import logging
import re
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional, Sequence

REDACTED = "[redacted]"

# Header/query credentials that must never reach log output.
_CREDENTIAL_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"(Bearer\s+)([A-Za-z0-9\-._~+/=|]+)",
        r"(api_token=)([^&\s]+)",
        r"(X-API-Key[=:]\s*)([^&\s]+)",
        r"(X-User-Token[=:]\s*)([^&\s]+)",
    )
)

_request_id: ContextVar[Optional[str]] = ContextVar("julienned_request_id", default=None)
_user_id: ContextVar[Optional[int]] = ContextVar("julienned_user_id", default=None)


@contextmanager
def log_context(*, request_id: Optional[str] = None, user_id: Optional[int] = None) -> Iterator[None]:
    """Attach ``request_id``/``user_id`` to every record logged inside the block."""

    request_token = _request_id.set(request_id) if request_id is not None else None
    user_token = _user_id.set(user_id) if user_id is not None else None
    try:
        yield
    finally:
        if user_token is not None:
            _user_id.reset(user_token)
        if request_token is not None:
            _request_id.reset(request_token)


def redact(message: str, secrets: Sequence[str] = ()) -> str:
    for pattern in _CREDENTIAL_PATTERNS:
        message = pattern.sub(r"\1" + REDACTED, message)
    for secret in secrets:
        if secret:
            message = message.replace(secret, REDACTED)
    return message


class RequestContextFilter(logging.Filter):
    """Copy the bound request/user ids onto records that do not carry them."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = _request_id.get()
        if getattr(record, "user_id", None) is None:
            record.user_id = _user_id.get()
        return True


class SensitiveDataFilter(logging.Filter):
    """Redact configured secrets and credential headers from log records."""

    def __init__(self, secrets: Iterable[str]):
        super().__init__()
        self._secrets = [secret.strip() for secret in secrets if secret and secret.strip()]

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        sanitized = redact(message, self._secrets)
        if sanitized != message:
            record.msg = sanitized
            record.args = ()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in ("request_id", "user_id"):
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def configure_logging(level_name: str, fmt: str, secrets: Iterable[str]) -> None:
    """Install a single root handler with context injection and redaction."""

    numeric_level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler()
    if (fmt or "plain").lower() == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    handler.setFormatter(formatter)

    redaction = SensitiveDataFilter(secrets)
    handler.addFilter(RequestContextFilter())
    handler.addFilter(redaction)

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(numeric_level)

    logging.captureWarnings(True)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = []
        logger.setLevel(numeric_level)
        logger.propagate = True
        logger.addFilter(redaction)


__all__ = [
    "REDACTED",
    "log_context",
    "redact",
    "RequestContextFilter",
    "SensitiveDataFilter",
    "JsonFormatter",
    "configure_logging",
]
