"""
Date coercion for values read back from either store.

SQLite hands back naive datetimes, Firestore hands back timezone-aware
timestamps, and JSON payloads carry ISO strings.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def as_date(value: Optional[DateLike]) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def as_naive_utc(value: Optional[DateLike]) -> Optional[datetime]:
    """Comparable datetime: aware values are converted to UTC and stripped"""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    elif not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
