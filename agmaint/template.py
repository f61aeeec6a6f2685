"""MaintenanceTemplate class for reusable sets of maintenance tasks."""

from typing import List, Optional

from .calculations import validate_interval
from .equipment import Equipment
from .maintenance_item import MaintenanceItem


class TemplateTask:
    """One task in a template: a name and an interval in days."""

    def __init__(self, name: str, interval_days: int, notes: Optional[str] = None):
        self.name = name
        self.interval_days = validate_interval(interval_days)
        self.notes = notes


class MaintenanceTemplate:
    """A named set of tasks that can be applied to equipment of a given type."""

    def __init__(
            self,
            id: str,
            name: str,
            equipment_type: Optional[str] = None,
            tasks: Optional[List[TemplateTask]] = None,
    ):
        self.id = id
        self.name = name
        self.equipment_type = equipment_type
        self.tasks = tasks or []

    def apply_to(self, equipment: Equipment) -> List[str]:
        """
        Add an item to the equipment for each task it does not already have.

        Matching is by name, case-insensitive. New items start with no
        completion date. Returns the names of the items added.
        """
        added = []
        for task in self.tasks:
            if equipment.get_item(task.name) is not None:
                continue
            equipment.add_item(
                MaintenanceItem(task.name, task.interval_days, notes=task.notes)
            )
            added.append(task.name)
        return added
