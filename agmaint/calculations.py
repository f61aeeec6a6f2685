"""Helper functions for maintenance due calculations."""

from datetime import date, datetime
from typing import Optional

from dateutil.relativedelta import relativedelta

from .status import Status

# Items due within this many days are COMING_DUE
COMING_DUE_DAYS = 7


class InvalidInterval(ValueError):
    """Raised when a maintenance interval is not a positive whole number of days."""


def validate_interval(interval_days) -> int:
    """Return interval_days if it is a positive int, else raise InvalidInterval."""
    if isinstance(interval_days, bool) or not isinstance(interval_days, int):
        raise InvalidInterval(f"Interval must be a whole number of days, got {interval_days!r}")
    if interval_days <= 0:
        raise InvalidInterval(f"Interval must be positive, got {interval_days}")
    return interval_days


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def calc_due_date(last_date: Optional[date], interval_days: int) -> Optional[date]:
    """Calculate next due date: last + interval days. None when never completed."""
    validate_interval(interval_days)
    if last_date is None:
        return None
    return _as_date(last_date) + relativedelta(days=interval_days)


def calc_days_until_due(
    last_date: Optional[date], interval_days: int, now: date
) -> Optional[int]:
    """Whole days from now until the next due date (negative when overdue)."""
    due = calc_due_date(last_date, interval_days)
    if due is None:
        return None
    return (due - _as_date(now)).days


def check_status(days_until_due: Optional[int]) -> Status:
    """Classify a day count. None (never completed) is PAST_DUE."""
    if days_until_due is None or days_until_due < 0:
        return Status.PAST_DUE
    if days_until_due <= COMING_DUE_DAYS:
        return Status.COMING_DUE
    return Status.ON_SCHEDULE


def evaluate_status(
    last_completed_date: Optional[date], interval_days: int, now: date
) -> Status:
    """
    Derive the status of a maintenance item.

    - Never completed, or due date already passed: PAST_DUE
    - Due within COMING_DUE_DAYS (inclusive, today counts): COMING_DUE
    - Otherwise: ON_SCHEDULE

    ``now`` is supplied by the caller so the result only depends on the
    arguments. Raises InvalidInterval for a non-positive or non-integer
    interval, even when the item has never been completed.
    """
    return check_status(calc_days_until_due(last_completed_date, interval_days, now))
