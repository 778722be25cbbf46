"""Structured JSON logging with secret masking and request correlation.

Provides JSON-formatted logs with automatic secret masking and request ID tracking.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import time
import uuid
from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from typing import Any, TextIO

# One id per inference request, shared by every log line of that request
_request_id: ContextVar[str] = ContextVar("request_id", default="")


def set_request_id(value: str | None = None) -> str:
    """Set current request_id (or generate new). Returns active id."""
    rid = value or str(uuid.uuid4())
    _request_id.set(rid)
    return rid


def get_request_id() -> str:
    """Get current request_id for contextual logging."""
    return _request_id.get()


# --- Secret masking patterns ---
_PATTERNS = [
    # BigCommerce access tokens are 31 lowercase alnum characters
    (re.compile(r"\b[a-z0-9]{31}\b"), "***"),
    # Long hashes/base64/hex
    (re.compile(r"\b[A-Za-z0-9+/=_-]{32,}\b"), "***"),
    # Bearer tokens
    (re.compile(r"(?i)\bBearer\s+[A-Za-z0-9._-]{10,}\b"), "Bearer ***"),
]

_SENSITIVE_KEYS = {
    "authorization",
    "x-auth-token",
    "x-auth-client",
    "token",
    "access_token",
    "bigcommerce_access_token",
    "api_key",
    "client_secret",
    "password",
    "secret",
}

# Attributes every LogRecord carries; anything else came in through `extra=`
_RECORD_ATTRS = frozenset(
    (
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
    )
)


def _mask_value(v: Any) -> Any:
    """Recursively mask sensitive data in any structure."""
    if v is None:
        return v
    if isinstance(v, (int, float, bool)):
        return v
    if isinstance(v, (date, datetime)):
        return v.isoformat()
    if is_dataclass(v) and not isinstance(v, type):
        v = asdict(v)
    if isinstance(v, Mapping):
        return {
            k: ("***" if str(k).lower() in _SENSITIVE_KEYS else _mask_value(val))
            for k, val in v.items()
        }
    if isinstance(v, (list, tuple, set)):
        return [_mask_value(i) for i in v]
    s = str(v)
    for rx, repl in _PATTERNS:
        s = rx.sub(repl, s)
    return s


class JsonFormatter(logging.Formatter):
    """JSON log formatter with automatic secret masking."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON with masked secrets."""
        payload: dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int((record.created - int(record.created)) * 1000):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": _mask_value(record.getMessage()),
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
            "request_id": get_request_id() or None,
        }

        extras = {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}
        if extras:
            payload["extra"] = _mask_value(extras)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def setup_logging(
    level: str | int = "INFO",
    stream: TextIO | None = None,
    file_path: str | None = None,
) -> None:
    """Route the root logger through JsonFormatter.

    Args:
        level: Log level (INFO, DEBUG, WARNING, ERROR)
        stream: Stream for JSON lines; stderr when no file is given either
        file_path: Append JSON lines to this file as well

    """
    root = logging.getLogger()
    root.setLevel(logging.getLevelName(level) if isinstance(level, str) else level)

    for h in list(root.handlers):
        root.removeHandler(h)

    handlers: list[logging.Handler] = []
    if stream is not None or not file_path:
        handlers.append(logging.StreamHandler(stream or sys.stderr))
    if file_path:
        handlers.append(logging.FileHandler(file_path, encoding="utf-8"))

    fmt = JsonFormatter()
    for handler in handlers:
        handler.setFormatter(fmt)
        root.addHandler(handler)

    # aiohttp access logs duplicate our http_response events
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get logger instance by name."""
    return logging.getLogger(name)


__all__ = [
    "setup_logging",
    "get_logger",
    "set_request_id",
    "get_request_id",
    "JsonFormatter",
]
