"""ScheduleEntry class for planned maintenance work."""
from datetime import date
from typing import Optional


class ScheduleEntry:
    """Maintenance work planned for a date, optionally tied to an item."""

    def __init__(
            self,
            id: str,
            equipment_id: str,
            scheduled_date: date,
            item_name: Optional[str] = None,
            assigned_to: Optional[str] = None,
            notes: Optional[str] = None,
            completed: bool = False,
    ):
        self.id = id
        self.equipment_id = equipment_id
        self.scheduled_date = scheduled_date
        self.item_name = item_name
        self.assigned_to = assigned_to
        self.notes = notes
        self.completed = completed or False

    def days_until(self, now: date) -> int:
        return (self.scheduled_date - now).days

    def is_overdue(self, now: date) -> bool:
        """Not completed and the scheduled date has passed."""
        return not self.completed and self.scheduled_date < now
