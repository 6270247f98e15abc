"""Identifier and timestamp generation for TEOS envelopes.

Every envelope carries a random UUID (version 4) and a creation timestamp
in milliseconds since the Unix epoch. UUIDs are unique but not sortable;
creation order is recovered from the timestamp.
"""

import time
import uuid
from datetime import datetime, timedelta, timezone


def generate_identifier() -> str:
    """Generate a new envelope identifier.

    Example:
        >>> len(generate_identifier())
        36
    """
    return str(uuid.uuid4())


def current_timestamp_ms() -> int:
    """Current wall-clock time in whole milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def timestamp_to_datetime(timestamp_ms: int) -> datetime:
    """Convert an envelope timestamp to a timezone-aware UTC datetime.

    Example:
        >>> timestamp_to_datetime(0).isoformat()
        '1970-01-01T00:00:00+00:00'
    """
    seconds, millis = divmod(timestamp_ms, 1000)
    return datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(milliseconds=millis)
