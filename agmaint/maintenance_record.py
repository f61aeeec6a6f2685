"""MaintenanceRecord class for logged maintenance events."""
from datetime import date
from typing import Optional


class MaintenanceRecord:
    """A record of maintenance performed on a piece of equipment."""

    def __init__(
            self,
            item_name: str,
            date: date,
            hours: Optional[float] = None,
            performed_by: Optional[str] = None,
            notes: Optional[str] = None,
            cost: Optional[float] = None,
    ):
        self.item_name = item_name
        self.date = date
        self.hours = hours
        self.performed_by = performed_by
        self.notes = notes
        self.cost = cost
