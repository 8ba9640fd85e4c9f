"""Helper functions for due date calculations."""

from datetime import date, datetime, timedelta
from typing import Optional, Union

from dateutil.parser import isoparse

from .periodicity import Periodicity
from .status import Urgency

# Days remaining for a task with no due date: it never expires
NEVER_DUE = 999

DateLike = Union[str, date, datetime, None]


def parse_date(value: DateLike) -> Optional[date]:
    """
    Normalize a stored date to a calendar date.

    Accepts ISO dates, ISO timestamps (time-of-day is dropped) and
    date/datetime objects. Anything unparseable returns None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return isoparse(value.strip()).date()
    except (ValueError, OverflowError):
        return None


def format_timestamp(moment: datetime) -> str:
    """ISO 8601 timestamp, with a 'Z' suffix for UTC."""
    if moment.utcoffset() == timedelta(0):
        return moment.replace(tzinfo=None).isoformat() + "Z"
    return moment.isoformat()


def calc_next_due(base: DateLike, periodicity: Periodicity) -> Optional[date]:
    """Calculate next due date: base + periodicity interval."""
    base_date = parse_date(base)
    interval = periodicity.interval
    if base_date is None or interval is None:
        return None
    return base_date + interval


def days_remaining(due: DateLike, today: Union[date, datetime]) -> int:
    """
    Signed whole days from today until due.

    0 = due today, negative = overdue, positive = upcoming.
    Missing or malformed due dates return NEVER_DUE.
    """
    due_date = parse_date(due)
    if due_date is None:
        return NEVER_DUE
    return (due_date - parse_date(today)).days


def check_urgency(days: int, soon_days: int) -> Urgency:
    """Determine urgency from days remaining."""
    if days < 0:
        return Urgency.OVERDUE
    if days <= soon_days:
        return Urgency.DUE_SOON
    return Urgency.OK
