"""Equipment class - a machine with its maintenance items and history."""

import logging
from datetime import date
from typing import Dict, List, Optional

from .item_status import ItemStatus
from .maintenance_item import MaintenanceItem
from .maintenance_record import MaintenanceRecord
from .status import Status

logger = logging.getLogger(__name__)


class Equipment:
    """A piece of equipment with its maintenance items and service history."""

    def __init__(
        self,
        id: str,
        name: str,
        equipment_type: Optional[str] = None,
        make: Optional[str] = None,
        model: Optional[str] = None,
        year: Optional[int] = None,
        serial_number: Optional[str] = None,
        hours: Optional[float] = None,
        notes: Optional[str] = None,
        items: Optional[List[MaintenanceItem]] = None,
        history: Optional[List[MaintenanceRecord]] = None,
    ):
        self.id = id
        self.name = name
        self.equipment_type = equipment_type
        self.make = make
        self.model = model
        self.year = year
        self.serial_number = serial_number
        self.hours = hours
        self.notes = notes
        self.items = items or []
        self.history = history or []

    @property
    def display_name(self) -> str:
        """Human-readable name, e.g. 'North Tractor (2019 John Deere 6120M)'."""
        parts = [str(p) for p in (self.year, self.make, self.model) if p]
        if not parts:
            return self.name
        return f"{self.name} ({' '.join(parts)})"

    def get_item(self, name: str) -> Optional[MaintenanceItem]:
        """Find a maintenance item by name (case-insensitive)."""
        wanted = name.strip().lower()
        for item in self.items:
            if item.name.lower() == wanted:
                return item
        return None

    def add_item(self, item: MaintenanceItem) -> None:
        if self.get_item(item.name) is not None:
            raise ValueError(f"{self.name} already has a '{item.name}' item")
        self.items.append(item)

    def remove_item(self, name: str) -> MaintenanceItem:
        item = self.get_item(name)
        if item is None:
            raise KeyError(name)
        self.items.remove(item)
        return item

    def log_maintenance(
        self,
        item_name: str,
        on: date,
        hours: Optional[float] = None,
        performed_by: Optional[str] = None,
        notes: Optional[str] = None,
        cost: Optional[float] = None,
    ) -> MaintenanceRecord:
        """
        Log a completed maintenance event.

        Marks the item completed, appends a history record and raises the
        hour meter if the reading is higher than the stored one.
        """
        if hours is not None and hours < 0:
            raise ValueError(f"Hours must not be negative (got {hours})")
        if cost is not None and cost < 0:
            raise ValueError(f"Cost must not be negative (got {cost})")
        item = self.get_item(item_name)
        if item is None:
            raise KeyError(item_name)

        item.mark_completed(on)
        record = MaintenanceRecord(
            item_name=item.name,
            date=on,
            hours=hours,
            performed_by=performed_by,
            notes=notes,
            cost=cost,
        )
        self.history.append(record)
        if hours is not None and (self.hours is None or hours > self.hours):
            self.hours = hours
        logger.debug("Logged %s on %s for %s", item.name, on, self.id)
        return record

    def get_item_status(self, item: MaintenanceItem, now: date) -> ItemStatus:
        return ItemStatus(
            equipment=self,
            item=item,
            status=item.status(now),
            due_date=item.due_date,
            days_until_due=item.days_until_due(now),
        )

    def get_all_item_status(self, now: date) -> List[ItemStatus]:
        """Status for every item, most urgent first."""
        statuses = [self.get_item_status(item, now) for item in self.items]
        statuses.sort(key=_urgency_key)
        return statuses

    def worst_status(self, now: date) -> Optional[Status]:
        """Most urgent status over all items, None when there are no items."""
        if not self.items:
            return None
        return min((item.status(now) for item in self.items), key=lambda s: s.value)

    def status_counts(self, now: date) -> Dict[Status, int]:
        counts = {status: 0 for status in Status}
        for item in self.items:
            counts[item.status(now)] += 1
        return counts

    def get_history_sorted(
        self, sort_by: str = "date", reverse: bool = True
    ) -> List[MaintenanceRecord]:
        """
        Get history records sorted by specified field.

        Args:
            sort_by: "date" or "item"
            reverse: If True, newest first (default)
        """
        if sort_by == "date":
            return sorted(self.history, key=lambda h: h.date, reverse=reverse)
        elif sort_by == "item":
            return sorted(
                self.history, key=lambda h: (h.item_name.lower(), h.date), reverse=reverse
            )
        return list(self.history)


def _urgency_key(s: ItemStatus):
    # Never-completed items sort ahead of dated overdue ones
    days = s.days_until_due if s.days_until_due is not None else float("-inf")
    return (s.status.value, days, s.item.name.lower())
