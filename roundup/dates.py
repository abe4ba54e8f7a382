"""Timestamp codec for roundup.

Pure functions converting the fixed ``YYYY-MM-DD HH:mm:ss`` calendar format,
read in the UTC+05:30 zone, to absolute instants and back.
"""

import re
from datetime import datetime, timedelta
from typing import Any

from roundup.domain.models import Instant
from roundup.errors import InvalidTimestampError

TIMESTAMP_FORMAT = "YYYY-MM-DD HH:mm:ss"
TIMESTAMP_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})$", re.ASCII)

IST_OFFSET_SECONDS = 5 * 3600 + 30 * 60
_EPOCH = datetime(1970, 1, 1)


def parse_timestamp(value: Any, field_name: str = "timestamp") -> Instant:
    """Parse a calendar timestamp into an absolute instant.

    Calendar fields that do not form a real date and time (February 30th,
    hour 24) are rejected rather than normalized.

    Args:
        value: Text in YYYY-MM-DD HH:mm:ss format.
        field_name: Name used in error messages.

    Returns:
        Seconds since the Unix epoch.

    Raises:
        InvalidTimestampError: If the text is not a valid timestamp.
    """
    if not isinstance(value, str):
        raise InvalidTimestampError(f"{field_name} must be a string in format {TIMESTAMP_FORMAT}")

    match = TIMESTAMP_RE.match(value.strip())
    if not match:
        raise InvalidTimestampError(f"{field_name} must follow {TIMESTAMP_FORMAT}")

    year, month, day, hour, minute, second = (int(part) for part in match.groups())

    try:
        local = datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        raise InvalidTimestampError(f"{field_name} is not a valid calendar timestamp") from e

    return Instant((local - _EPOCH) // timedelta(seconds=1) - IST_OFFSET_SECONDS)


def format_timestamp(instant: Instant) -> str:
    """Format an instant as YYYY-MM-DD HH:mm:ss in the UTC+05:30 zone."""
    local = _EPOCH + timedelta(seconds=instant + IST_OFFSET_SECONDS)
    return (
        f"{local.year:04d}-{local.month:02d}-{local.day:02d} "
        f"{local.hour:02d}:{local.minute:02d}:{local.second:02d}"
    )


def select_timestamp_text(record: Any) -> str:
    """Pick the timestamp text from a record, falling back to its ``date`` key.

    Raises:
        InvalidTimestampError: If neither key holds a string.
    """
    if isinstance(record, dict):
        chosen = record.get("timestamp")
        if not isinstance(chosen, str):
            chosen = record.get("date")
        if isinstance(chosen, str):
            return chosen
    raise InvalidTimestampError("timestamp is required")
