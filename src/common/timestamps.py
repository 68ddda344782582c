"""Helpers for registry publish timestamps."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def epoch_ms_from_iso8601(value: Optional[str]) -> Optional[int]:
    """Parse an ISO-8601 string into epoch milliseconds."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        if text.endswith("Z"):
            parsed = datetime.fromisoformat(text[:-1]).replace(tzinfo=timezone.utc)
        else:
            parsed = datetime.fromisoformat(text)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
        return int(parsed.timestamp() * 1000)
    except (ValueError, TypeError):
        return None


def publish_sort_key(value: Optional[str]) -> float:
    """Sort key for a publish instant; unparseable values sort as oldest."""
    parsed = epoch_ms_from_iso8601(value)
    return float(parsed) if parsed is not None else float("-inf")
