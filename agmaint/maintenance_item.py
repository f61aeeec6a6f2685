"""MaintenanceItem class for recurring equipment tasks."""

from datetime import date
from typing import Optional

from .calculations import (
    calc_due_date,
    calc_days_until_due,
    evaluate_status,
    validate_interval,
)
from .status import Status


class MaintenanceItem:
    """A recurring task on a piece of equipment with a required interval."""

    def __init__(
            self,
            name: str,
            interval_days: int,
            last_completed_date: Optional[date] = None,
            notes: Optional[str] = None,
    ):
        self.name = name
        self.interval_days = validate_interval(interval_days)
        self.last_completed_date = last_completed_date
        self.notes = notes

    @property
    def due_date(self) -> Optional[date]:
        """Next due date, None if never completed."""
        return calc_due_date(self.last_completed_date, self.interval_days)

    def days_until_due(self, now: date) -> Optional[int]:
        return calc_days_until_due(self.last_completed_date, self.interval_days, now)

    def status(self, now: date) -> Status:
        return evaluate_status(self.last_completed_date, self.interval_days, now)

    def mark_completed(self, on: date) -> None:
        """Record a completion. A backdated completion never moves the date back."""
        if self.last_completed_date is None or on > self.last_completed_date:
            self.last_completed_date = on
