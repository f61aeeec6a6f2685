"""Farm class - the aggregate owning all equipment, templates, schedules and issues."""

import uuid
from datetime import date, timedelta
from typing import Dict, List, Optional

from .equipment import Equipment
from .issue import Issue
from .item_status import ItemStatus
from .schedule_entry import ScheduleEntry
from .status import Status
from .template import MaintenanceTemplate


class Farm:
    """
    Everything loaded from one farm document.

    A Farm is loaded per command or request and passed to whatever renders
    it; nothing holds collections at module level.
    """

    def __init__(
        self,
        name: str,
        equipment: Optional[List[Equipment]] = None,
        templates: Optional[List[MaintenanceTemplate]] = None,
        schedules: Optional[List[ScheduleEntry]] = None,
        issues: Optional[List[Issue]] = None,
    ):
        self.name = name
        self.equipment = equipment or []
        self.templates = templates or []
        self.schedules = schedules or []
        self.issues = issues or []

    def get_equipment(self, equipment_id: str) -> Optional[Equipment]:
        for eq in self.equipment:
            if eq.id == equipment_id:
                return eq
        return None

    def get_template(self, template_id: str) -> Optional[MaintenanceTemplate]:
        for tpl in self.templates:
            if tpl.id == template_id:
                return tpl
        return None

    def get_schedule(self, schedule_id: str) -> Optional[ScheduleEntry]:
        for entry in self.schedules:
            if entry.id == schedule_id:
                return entry
        return None

    def get_issue(self, issue_id: str) -> Optional[Issue]:
        for issue in self.issues:
            if issue.id == issue_id:
                return issue
        return None

    def new_id(self, prefix: str) -> str:
        """Generate a short id like 'eq-1a2b3c4d' not used by any document."""
        taken = {
            doc.id
            for docs in (self.equipment, self.templates, self.schedules, self.issues)
            for doc in docs
        }
        while True:
            candidate = f"{prefix}-{uuid.uuid4().hex[:8]}"
            if candidate not in taken:
                return candidate

    def get_all_item_status(self, now: date) -> List[ItemStatus]:
        """Status of every maintenance item on every piece of equipment."""
        result = []
        for eq in self.equipment:
            result.extend(eq.get_all_item_status(now))
        result.sort(key=lambda s: (s.status.value, s.equipment.name.lower(), s.item.name.lower()))
        return result

    def status_counts(self, now: date) -> Dict[Status, int]:
        counts = {status: 0 for status in Status}
        for eq in self.equipment:
            for status, n in eq.status_counts(now).items():
                counts[status] += n
        return counts

    def upcoming_schedules(self, now: date, within_days: int = 14) -> List[ScheduleEntry]:
        """Incomplete entries due by now + within_days, overdue ones included."""
        horizon = now + timedelta(days=within_days)
        entries = [
            e for e in self.schedules if not e.completed and e.scheduled_date <= horizon
        ]
        return sorted(entries, key=lambda e: (e.scheduled_date, e.id))

    def open_issues(self, equipment_id: Optional[str] = None) -> List[Issue]:
        """Unresolved issues, highest priority first, then oldest first."""
        issues = [i for i in self.issues if i.is_open]
        if equipment_id is not None:
            issues = [i for i in issues if i.equipment_id == equipment_id]
        return sorted(issues, key=lambda i: (i.priority_rank, i.reported_date, i.id))
