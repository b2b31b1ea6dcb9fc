"""Time helpers shared by the services."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime, time

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def as_aware(value: datetime) -> datetime:
    """Attach the local timezone to a naive datetime; aware values pass through."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


def to_utc_naive(value: date | datetime) -> datetime:
    """Normalize a date or datetime to a naive UTC datetime for storage.

    Plain dates become midnight UTC of that day. Naive datetimes are taken as
    local wall time.
    """
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    return as_aware(value).astimezone(UTC).replace(tzinfo=None)


def calendar_day(value: date | datetime, reference: datetime) -> date:
    """Calendar day of ``value`` as seen in the timezone of ``reference``."""
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(reference.tzinfo).date()


def shift_years(day: date, years: int) -> date:
    """Move a date by whole years; Feb 29 lands on Feb 28 in non-leap years."""
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        return day.replace(year=day.year + years, day=28)


def age_on(date_of_birth: date, on: date) -> int:
    """Age in completed years on the given day."""
    age = on.year - date_of_birth.year
    if date_of_birth > shift_years(on, -age):
        age -= 1
    return age
