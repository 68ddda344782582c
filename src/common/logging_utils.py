"""Centralized logging helpers.

Provides root logger configuration, structured ``extra`` payloads for log
records, URL redaction for request targets and a small timing helper.
"""
from __future__ import annotations

import logging
import os
import re
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_QUERY = re.compile(r"(?i)\b(token|key|secret|password|auth)=([^&]+)")


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once.

    The level comes from ``level`` or the SCRIPTDOCS_LOG_LEVEL environment
    variable and defaults to INFO.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL, "INFO")).upper()
    level_value = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level_value)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping, dropping fields that are None."""
    return {key: value for key, value in fields.items() if value is not None}


def redact(text: str) -> str:
    """Mask credential-looking query values in ``text``."""
    if not text:
        return text
    return _SENSITIVE_QUERY.sub(r"\1=[REDACTED]", text)


def safe_url(url: str) -> str:
    """Return ``url`` with userinfo and sensitive query values masked."""
    if not url:
        return url
    try:
        parts = urlsplit(url)
    except ValueError:
        return redact(url)
    netloc = parts.netloc
    if "@" in netloc:
        netloc = "[REDACTED]@" + netloc.rsplit("@", 1)[1]
    return urlunsplit((parts.scheme, netloc, parts.path, redact(parts.query), parts.fragment))


class Timer:
    """Context manager measuring wall time in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
