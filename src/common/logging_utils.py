"""Centralized logging helpers.

Provides one-time logging configuration plus small helpers used for
structured DEBUG traces across the HTTP, repository and resolver layers.
"""
from __future__ import annotations

import logging
import os
import re
import time
from typing import Any, Dict
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_KEYS = ("token", "access_token", "key", "secret", "password", "auth")
_REDACTED = "***"
_BEARER_RE = re.compile(r"(?i)(bearer|token)\s+[A-Za-z0-9_\-\.]+")


def configure_logging() -> None:
    """Configure the root logger once.

    Level comes from SWIZZLE_LOG_LEVEL (default INFO). Calling this more than
    once only updates the level.
    """
    level_name = os.environ.get("SWIZZLE_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when the logger would emit DEBUG records."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    None values are dropped so records only carry populated fields.
    """
    return {k: v for k, v in fields.items() if v is not None}


def redact(text: str) -> str:
    """Mask bearer/token credentials inside free text."""
    if not text:
        return text
    return _BEARER_RE.sub(lambda m: f"{m.group(1)} {_REDACTED}", text)


def safe_url(url: str) -> str:
    """Return url with credentials and sensitive query values masked."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return redact(url)
    netloc = parts.netloc
    if "@" in netloc:
        netloc = f"{_REDACTED}@{netloc.split('@', 1)[1]}"
    query = parts.query
    if query:
        pairs = [
            (k, _REDACTED if k.lower() in _SENSITIVE_KEYS else v)
            for k, v in parse_qsl(query, keep_blank_values=True)
        ]
        query = urlencode(pairs, safe="*")
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds, measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
