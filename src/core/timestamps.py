"""Timestamp conversion helpers.

Every date-time leaving the service uses one canonical form: UTC ISO-8601
with millisecond precision and a ``Z`` suffix (``2024-01-01T00:00:00.000Z``).
"""

from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from typing import Any


def to_utc_z(dt: datetime) -> str:
    """Format a datetime in the canonical form. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc)
    return dt_utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt_utc.microsecond // 1000:03d}Z"


def utc_now_z() -> str:
    """Current UTC time in the canonical form."""
    return to_utc_z(datetime.now(timezone.utc))


def _from_epoch_mapping(value: Mapping[str, Any]) -> datetime | None:
    seconds = value.get("seconds", value.get("_seconds"))
    if seconds is None:
        return None
    nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
    try:
        return datetime.fromtimestamp(int(seconds) + int(nanos) / 1e9, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Interpret a stored timestamp value.

    Accepts datetimes, dates, ISO-8601 strings and exported timestamp
    mappings (``{"seconds": ..., "nanoseconds": ...}``, with or without a
    leading underscore). Returns ``None`` for anything else.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    if isinstance(value, Mapping):
        return _from_epoch_mapping(value)
    return None


def convert_timestamp(value: Any) -> str | None:
    """Convert an opaque stored timestamp to the canonical string, or None."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return to_utc_z(parsed)
