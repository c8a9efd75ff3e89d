"""
Date helpers for ISO-8601 date / date-time values exchanged over the API
"""
from datetime import datetime, date, timedelta, timezone
from typing import Optional, Union
import re

DateLike = Union[str, date, datetime, None]

ISO_DATE_PATTERN = re.compile(r'^[0-9]{4}-[0-9]{2}-[0-9]{2}$')

def _naive_utc(value: datetime) -> datetime:
    """Offset-aware values are converted to UTC before dropping tzinfo"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

def parse_date(value: DateLike) -> Optional[datetime]:
    """
    Parse an ISO date or date-time into a naive UTC datetime.
    Date-only values resolve to midnight. Unparseable input returns None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return _naive_utc(parsed)

def to_iso_date(value: DateLike) -> Optional[str]:
    """Render any accepted date value as YYYY-MM-DD"""
    parsed = parse_date(value)
    return parsed.date().isoformat() if parsed else None

def is_iso_date(value: str) -> bool:
    """Strict YYYY-MM-DD; compact and week-date forms are rejected"""
    if not isinstance(value, str) or not ISO_DATE_PATTERN.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
        return True
    except ValueError:
        return False

def period_bounds(period: str, today: Optional[date] = None):
    """
    Inclusive (start, end) dates for a named reporting period.
    Supported: thisMonth, lastMonth, thisYear. Unknown periods return None.
    """
    today = today or datetime.utcnow().date()

    if period == "thisMonth":
        start = today.replace(day=1)
        next_month = (start + timedelta(days=32)).replace(day=1)
        return start, next_month - timedelta(days=1)
    if period == "lastMonth":
        end = today.replace(day=1) - timedelta(days=1)
        return end.replace(day=1), end
    if period == "thisYear":
        return date(today.year, 1, 1), date(today.year, 12, 31)
    return None
