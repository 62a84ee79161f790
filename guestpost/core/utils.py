"""
Utility helpers shared across services.
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone

_id_lock = threading.Lock()
_last_id = 0


def new_id() -> str:
    """
    Time-based identifier (milliseconds since epoch, as a string).

    Strictly increasing within the process so that records created in the
    same millisecond still get distinct ids.
    """
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
        return str(candidate)


def utc_now_iso() -> str:
    """Current UTC time in ISO-8601 with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str | None) -> datetime:
    """Parse a stored timestamp; unparsable or missing values sort as the epoch."""
    if not value:
        return datetime.fromtimestamp(0, timezone.utc)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return datetime.fromtimestamp(0, timezone.utc)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
