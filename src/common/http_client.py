"""Shared HTTP access for registry lookups.

One ``requests.Session`` per worker thread, a lock-guarded response cache
shared by all threads, and a retry loop with exponential backoff. Failures
are reported through the returned status code (0 when no response was
received); callers decide whether that is fatal.
"""
from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Dict, NamedTuple, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


class HttpResult(NamedTuple):
    """Status, headers and decoded body of one GET. ``body`` is None when undecodable."""
    status_code: int
    headers: Dict[str, str]
    body: Optional[str]


class _ResponseCache:
    """TTL cache keyed by URL and request headers."""

    def __init__(self, ttl_sec: float):
        self.ttl_sec = ttl_sec
        self._entries: Dict[str, Tuple[HttpResult, float]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def key(url: str, headers: Optional[Dict[str, str]]) -> str:
        return url + "|" + "&".join(f"{k}={v}" for k, v in sorted((headers or {}).items()))

    def get(self, key: str) -> Optional[HttpResult]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            result, stored_at = entry
            if time.monotonic() - stored_at >= self.ttl_sec:
                del self._entries[key]
                return None
            return result

    def put(self, key: str, result: HttpResult) -> None:
        with self._lock:
            self._entries[key] = (result, time.monotonic())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_cache = _ResponseCache(Constants.HTTP_CACHE_TTL_SEC)
_local = threading.local()


def _session() -> requests.Session:
    """Session of the calling thread; sessions are not shared across threads."""
    session = getattr(_local, "session", None)
    if session is None:
        session = requests.Session()
        _local.session = session
    return session


def clear_cache() -> None:
    """Drop every cached response."""
    _cache.clear()


def _decode_body(response: requests.Response) -> Optional[str]:
    try:
        return response.content.decode(response.encoding or "utf-8")
    except (UnicodeDecodeError, LookupError):
        return None


def _backoff(attempt: int) -> None:
    if attempt + 1 < Constants.HTTP_RETRY_MAX:
        time.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * (2 ** attempt))


def robust_get(url: str, *, headers: Optional[Dict[str, str]] = None) -> HttpResult:
    """GET ``url`` with retries on transport errors and 5xx answers.

    Answers below 500 are cached for ``Constants.HTTP_CACHE_TTL_SEC``.
    """
    cache_key = _ResponseCache.key(url, headers)
    target = safe_url(url)

    cached = _cache.get(cache_key)
    if cached is not None:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP cache hit",
                extra=extra_context(event="cache_hit", component="http_client", target=target)
            )
        return cached

    failure = "no attempt made"
    for attempt in range(Constants.HTTP_RETRY_MAX):
        with Timer() as timer:
            try:
                response = _session().get(url, headers=headers, timeout=Constants.REQUEST_TIMEOUT)
            except requests.RequestException as exc:
                failure = "timeout" if isinstance(exc, requests.Timeout) else str(exc)
                logger.debug("GET %s failed (attempt %d): %s", target, attempt + 1, failure)
                _backoff(attempt)
                continue

        result = HttpResult(response.status_code, dict(response.headers), _decode_body(response))
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    status_code=result.status_code,
                    duration_ms=timer.duration_ms(),
                    attempt=attempt + 1,
                    target=target
                )
            )
        if result.status_code < 500:
            _cache.put(cache_key, result)
            return result
        failure = f"status {result.status_code}"
        if attempt + 1 == Constants.HTTP_RETRY_MAX:
            return result
        _backoff(attempt)

    return HttpResult(0, {}, f"Request failed after {Constants.HTTP_RETRY_MAX} attempts: {failure}")


def get_json(url: str, *, headers: Optional[Dict[str, str]] = None) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """GET ``url`` and parse a JSON body.

    Returns:
        Tuple of (status_code, headers, parsed JSON or None). The payload is
        None for non-200 answers and for bodies that are not valid JSON text.
    """
    result = robust_get(url, headers=headers)
    if result.status_code != 200 or not result.body:
        return result.status_code, result.headers, None
    try:
        return result.status_code, result.headers, json.loads(result.body)
    except ValueError:
        logger.debug("Response from %s is not valid JSON", safe_url(url))
        return result.status_code, result.headers, None
