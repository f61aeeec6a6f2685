"""
Agricultural equipment maintenance tracking models.

This package provides data models for tracking equipment maintenance:
- Status: Urgency levels (PAST_DUE, COMING_DUE, ON_SCHEDULE)
- MaintenanceItem: A recurring task with an interval in days
- MaintenanceRecord: Logged maintenance events
- Equipment: A machine with its items and history
- ItemStatus: Calculated status for one item
- MaintenanceTemplate: Reusable task sets applied to equipment
- ScheduleEntry: Planned maintenance work
- Issue: Problems reported against equipment
- Farm: Aggregate owning all of the above
"""

from .status import Status
from .calculations import (
    COMING_DUE_DAYS,
    InvalidInterval,
    validate_interval,
    calc_due_date,
    calc_days_until_due,
    check_status,
    evaluate_status,
)
from .maintenance_item import MaintenanceItem
from .maintenance_record import MaintenanceRecord
from .item_status import ItemStatus
from .equipment import Equipment
from .template import MaintenanceTemplate, TemplateTask
from .schedule_entry import ScheduleEntry
from .issue import Issue, PRIORITIES, STATES
from .farm import Farm
from .loader import (
    parse_date,
    load_farm,
    save_farm,
    create_farm,
    add_equipment,
    update_equipment,
    delete_equipment,
    add_maintenance_item,
    remove_maintenance_item,
    log_maintenance,
    add_template,
    delete_template,
    apply_template,
    add_schedule_entry,
    complete_schedule_entry,
    delete_schedule_entry,
    add_issue,
    update_issue_state,
    delete_issue,
)

__all__ = [
    "Status",
    "COMING_DUE_DAYS",
    "InvalidInterval",
    "validate_interval",
    "calc_due_date",
    "calc_days_until_due",
    "check_status",
    "evaluate_status",
    "MaintenanceItem",
    "MaintenanceRecord",
    "ItemStatus",
    "Equipment",
    "MaintenanceTemplate",
    "TemplateTask",
    "ScheduleEntry",
    "Issue",
    "PRIORITIES",
    "STATES",
    "Farm",
    "parse_date",
    "load_farm",
    "save_farm",
    "create_farm",
    "add_equipment",
    "update_equipment",
    "delete_equipment",
    "add_maintenance_item",
    "remove_maintenance_item",
    "log_maintenance",
    "add_template",
    "delete_template",
    "apply_template",
    "add_schedule_entry",
    "complete_schedule_entry",
    "delete_schedule_entry",
    "add_issue",
    "update_issue_state",
    "delete_issue",
]
