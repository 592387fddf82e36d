# app/utils/dates.py
"""
Date helpers for booking intervals.
All datetimes stored by the backend are naive UTC.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Union

from app.services.exceptions import InvalidInput

DateLike = Union[str, date, datetime]

MS_PER_DAY = 24 * 60 * 60 * 1000


def utcnow() -> datetime:
    """Current UTC time without tzinfo (matches what the DB stores)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_datetime(value: DateLike, field: str = "date") -> datetime:
    """
    Accepts ISO strings ("2024-06-01", "2024-06-01T10:00:00Z"), dates and datetimes.
    Aware values are converted to UTC and made naive.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise InvalidInput(f"Invalid {field}: {value!r}")
    else:
        raise InvalidInput(f"Invalid {field}: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
    # 23:59:59.999, millisecond precision like the stored timestamps
    return datetime.combine(value.date(), time(23, 59, 59, 999000))


def iter_days(start: datetime, end: datetime) -> Iterator[date]:
    """Yields every calendar day from start to end, both inclusive."""
    first = start.date()
    for offset in range((end.date() - first).days + 1):
        yield first + timedelta(days=offset)


def check_range(start: datetime, end: datetime, max_days: int, max_year: int):
    """Rejects intervals longer than max_days calendar days or reaching past max_year."""
    if end.year > max_year or start.year > max_year:
        raise InvalidInput(f"Bookings cannot extend beyond the year {max_year}.")
    if (end.date() - start.date()).days + 1 > max_days:
        raise InvalidInput(f"Bookings cannot span more than {max_days} days.")


def day_key(day: date) -> str:
    return day.isoformat()
