from datetime import datetime, timezone as dt_timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(dt_timezone.utc)


def to_utc_naive(dt: datetime | None) -> datetime | None:
    """
    Normalize any datetime to UTC-naive (tzinfo=None) for consistent storage/comparison.
    - Aware datetimes are converted to UTC and tzinfo is stripped
    - Naive datetimes are returned as-is (assumed UTC)
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(dt_timezone.utc).replace(tzinfo=None)


def to_utc_aware(dt: datetime | None) -> datetime | None:
    """
    Normalize any datetime to UTC-aware (tzinfo=UTC) for APIs needing tz-aware values.
    - Aware datetimes are converted to UTC
    - Naive datetimes are assumed UTC and tz attached
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)


def parse_datetime(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'. Returns None if unparseable."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def utcnow_naive() -> datetime:
    """Column default: current UTC time without tzinfo."""
    return utcnow().replace(tzinfo=None)
