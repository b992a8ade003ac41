"""Weekly session calendar of a class."""

from datetime import date, timedelta
from typing import List, Union

from academy.core.exceptions import InvalidDateRange

MAX_SESSIONS = 18
SESSION_STRIDE = timedelta(days=7)

DateLike = Union[date, str]


def parse_session_date(value: DateLike) -> date:
    """Accept a date or an ISO calendar day (YYYY-MM-DD)."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidDateRange(f"Invalid date: {value!r}")


def class_session_dates(
    start_date: DateLike,
    end_date: DateLike,
    max_sessions: int = MAX_SESSIONS,
) -> List[str]:
    """ISO dates from start_date every 7 days up to end_date inclusive.

    Only the first ``max_sessions`` dates are returned; the cap is a display
    limit of the attendance grid, not a rule about class length. An empty list
    is returned when start_date is after end_date.
    """
    start = parse_session_date(start_date)
    end = parse_session_date(end_date)
    dates: List[str] = []
    current = start
    while current <= end and len(dates) < max_sessions:
        dates.append(current.isoformat())
        current += SESSION_STRIDE
    return dates


def validate_date_range(start_date: DateLike, end_date: DateLike) -> None:
    """Raise InvalidDateRange when end precedes start."""
    if parse_session_date(start_date) > parse_session_date(end_date):
        raise InvalidDateRange(f"End date {end_date} is before start date {start_date}")
