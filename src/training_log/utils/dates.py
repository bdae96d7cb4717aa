"""Lenient ISO-8601 date handling for user-entered training data."""

import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string, date or datetime into a naive UTC datetime.

    Aware values are converted to UTC before dropping the offset so that
    browser-style timestamps ("2024-05-01T06:30:00.000Z") and plain dates
    ("2024-05-01") compare on the same axis. Unparseable input yields None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            logger.warning(f"Ignoring unparseable date: {value!r}")
            return None
    else:
        logger.warning(f"Ignoring date of unsupported type {type(value).__name__}")
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def to_day(value: Any) -> Optional[date]:
    """Calendar day of a date-like value, or None."""
    dt = parse_datetime(value)
    return dt.date() if dt else None
