"""Calendar helpers: date ranges and weekday checks, always in UTC."""
from datetime import date, datetime, timedelta, timezone
from typing import List, Union


def to_utc_date(value: Union[datetime, date]) -> date:
    """Calendar date of a timestamp in UTC (naive datetimes are taken as UTC)."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def is_weekend(day: Union[str, date]) -> bool:
    """Saturday or Sunday."""
    if isinstance(day, str):
        day = date.fromisoformat(day)
    return day.weekday() >= 5


class CalendarService:
    """
    Turns a date range into the calendar dates it covers.

    Holiday calendars are not modelled; callers filter weekends themselves.
    """

    def enumerate_dates(self, from_date: str, to_date: str) -> List[str]:
        """ISO dates from ``from_date`` to ``to_date`` inclusive. Empty if reversed."""
        current = date.fromisoformat(from_date)
        end = date.fromisoformat(to_date)
        dates = []
        while current <= end:
            dates.append(current.isoformat())
            current += timedelta(days=1)
        return dates

