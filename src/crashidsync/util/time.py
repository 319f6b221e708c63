from __future__ import annotations

from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime


def now_utc() -> datetime:
    """Return current time as tz-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_http_date(value: str) -> datetime:
    """
    Parse an HTTP-date (RFC 7231) header value into a tz-aware UTC datetime.

    Accepts strings like:
      - Wed, 21 Oct 2015 07:28:00 GMT
      - Wed, 21 Oct 2015 07:28:00 +0000
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("HTTP-date value must be a non-empty string")

    try:
        dt = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid HTTP-date: {value!r}") from exc

    # A "-0000" zone parses as naive; HTTP-dates are always UTC.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_http_date(dt: datetime) -> str:
    """Convert tz-aware datetime to an HTTP-date string (always GMT)."""
    dt = normalize_dt(dt).astimezone(timezone.utc)
    return format_datetime(dt, usegmt=True)


def normalize_dt(dt: datetime) -> datetime:
    """Ensure datetime is tz-aware. Raises if naive."""
    if not isinstance(dt, datetime):
        raise TypeError("dt must be a datetime")
    if dt.tzinfo is None:
        raise ValueError("naive datetime is not allowed; timezone-aware required")
    return dt
