"""YAML loading and saving utilities for farm documents."""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dateutil.parser import isoparse

from .equipment import Equipment
from .farm import Farm
from .issue import Issue
from .maintenance_item import MaintenanceItem
from .maintenance_record import MaintenanceRecord
from .schedule_entry import ScheduleEntry
from .template import MaintenanceTemplate, TemplateTask

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


# =============================================================================
# Parsing
# =============================================================================


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO date string (or a date YAML already parsed). None passes through."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return isoparse(str(value)).date()


def _item_from_dict(dct: Dict[str, Any]) -> MaintenanceItem:
    return MaintenanceItem(
        dct["name"],
        dct["intervalDays"],
        parse_date(dct.get("lastCompletedDate")),
        dct.get("notes"),
    )


def _record_from_dict(dct: Dict[str, Any]) -> MaintenanceRecord:
    return MaintenanceRecord(
        dct["item"],
        parse_date(dct["date"]),
        dct.get("hours"),
        dct.get("performedBy"),
        dct.get("notes"),
        dct.get("cost"),
    )


def _equipment_from_dict(dct: Dict[str, Any]) -> Equipment:
    return Equipment(
        id=dct["id"],
        name=dct["name"],
        equipment_type=dct.get("equipmentType"),
        make=dct.get("make"),
        model=dct.get("model"),
        year=dct.get("year"),
        serial_number=dct.get("serialNumber"),
        hours=dct.get("hours"),
        notes=dct.get("notes"),
        items=[_item_from_dict(d) for d in dct.get("items") or []],
        history=[_record_from_dict(d) for d in dct.get("history") or []],
    )


def _template_from_dict(dct: Dict[str, Any]) -> MaintenanceTemplate:
    tasks = [
        TemplateTask(d["name"], d["intervalDays"], d.get("notes"))
        for d in dct.get("tasks") or []
    ]
    return MaintenanceTemplate(dct["id"], dct["name"], dct.get("equipmentType"), tasks)


def _schedule_from_dict(dct: Dict[str, Any]) -> ScheduleEntry:
    return ScheduleEntry(
        id=dct["id"],
        equipment_id=dct["equipmentId"],
        scheduled_date=parse_date(dct["scheduledDate"]),
        item_name=dct.get("itemName"),
        assigned_to=dct.get("assignedTo"),
        notes=dct.get("notes"),
        completed=dct.get("completed", False),
    )


def _issue_from_dict(dct: Dict[str, Any]) -> Issue:
    return Issue(
        id=dct["id"],
        equipment_id=dct["equipmentId"],
        title=dct["title"],
        reported_date=parse_date(dct["reportedDate"]),
        description=dct.get("description"),
        priority=dct.get("priority", "medium"),
        state=dct.get("state", "open"),
        reported_by=dct.get("reportedBy"),
        resolved_date=parse_date(dct.get("resolvedDate")),
        resolution=dct.get("resolution"),
    )


def farm_from_dict(data: Optional[Dict[str, Any]]) -> Farm:
    """Build a Farm from a raw document dict."""
    data = data or {}
    meta = data.get("farm") or {}
    return Farm(
        name=meta.get("name", "Farm"),
        equipment=[_equipment_from_dict(d) for d in data.get("equipment") or []],
        templates=[_template_from_dict(d) for d in data.get("templates") or []],
        schedules=[_schedule_from_dict(d) for d in data.get("schedules") or []],
        issues=[_issue_from_dict(d) for d in data.get("issues") or []],
    )


# =============================================================================
# Serialization (camelCase keys, None values omitted for cleaner YAML)
# =============================================================================


def _compact(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _item_to_dict(item: MaintenanceItem) -> Dict[str, Any]:
    return _compact({
        "name": item.name,
        "intervalDays": item.interval_days,
        "lastCompletedDate": _iso(item.last_completed_date),
        "notes": item.notes,
    })


def _record_to_dict(record: MaintenanceRecord) -> Dict[str, Any]:
    return _compact({
        "item": record.item_name,
        "date": _iso(record.date),
        "hours": record.hours,
        "performedBy": record.performed_by,
        "notes": record.notes,
        "cost": record.cost,
    })


def _equipment_to_dict(eq: Equipment) -> Dict[str, Any]:
    d = _compact({
        "id": eq.id,
        "name": eq.name,
        "equipmentType": eq.equipment_type,
        "make": eq.make,
        "model": eq.model,
        "year": eq.year,
        "serialNumber": eq.serial_number,
        "hours": eq.hours,
        "notes": eq.notes,
    })
    d["items"] = [_item_to_dict(i) for i in eq.items]
    d["history"] = [_record_to_dict(h) for h in eq.history]
    return d


def _template_to_dict(tpl: MaintenanceTemplate) -> Dict[str, Any]:
    d = _compact({"id": tpl.id, "name": tpl.name, "equipmentType": tpl.equipment_type})
    d["tasks"] = [
        _compact({"name": t.name, "intervalDays": t.interval_days, "notes": t.notes})
        for t in tpl.tasks
    ]
    return d


def _schedule_to_dict(entry: ScheduleEntry) -> Dict[str, Any]:
    d = _compact({
        "id": entry.id,
        "equipmentId": entry.equipment_id,
        "itemName": entry.item_name,
        "scheduledDate": _iso(entry.scheduled_date),
        "assignedTo": entry.assigned_to,
        "notes": entry.notes,
    })
    if entry.completed:
        d["completed"] = True
    return d


def _issue_to_dict(issue: Issue) -> Dict[str, Any]:
    return _compact({
        "id": issue.id,
        "equipmentId": issue.equipment_id,
        "title": issue.title,
        "description": issue.description,
        "priority": issue.priority,
        "state": issue.state,
        "reportedDate": _iso(issue.reported_date),
        "reportedBy": issue.reported_by,
        "resolvedDate": _iso(issue.resolved_date),
        "resolution": issue.resolution,
    })


def farm_to_dict(farm: Farm) -> Dict[str, Any]:
    return {
        "farm": {"name": farm.name},
        "equipment": [_equipment_to_dict(e) for e in farm.equipment],
        "templates": [_template_to_dict(t) for t in farm.templates],
        "schedules": [_schedule_to_dict(s) for s in farm.schedules],
        "issues": [_issue_to_dict(i) for i in farm.issues],
    }


# =============================================================================
# Whole-document load/save
# =============================================================================


def load_farm(filename: PathLike) -> Farm:
    """Load a farm from a YAML file."""
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader)
    farm = farm_from_dict(data)
    logger.debug(
        "Loaded %s: %d equipment, %d templates, %d schedules, %d issues",
        filename, len(farm.equipment), len(farm.templates),
        len(farm.schedules), len(farm.issues),
    )
    return farm


def save_farm(filename: PathLike, farm: Farm) -> None:
    """Write the whole farm document back to a YAML file."""
    with open(filename, "w") as fp:
        yaml.dump(
            farm_to_dict(farm),
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def create_farm(filename: PathLike, name: str) -> Farm:
    """Create a new, empty farm document."""
    farm = Farm(name=name)
    Path(filename).parent.mkdir(parents=True, exist_ok=True)
    save_farm(filename, farm)
    logger.info("Created farm '%s' at %s", name, filename)
    return farm


# =============================================================================
# Document mutators: each loads the file, applies one change and saves it
# =============================================================================


def _require(found, kind: str, doc_id: str):
    if found is None:
        raise KeyError(f"{kind} '{doc_id}' not found")
    return found


def add_equipment(filename: PathLike, equipment: Equipment) -> Equipment:
    """Append equipment to the farm. Generates an id when equipment.id is empty."""
    farm = load_farm(filename)
    if not equipment.id:
        equipment.id = farm.new_id("eq")
    elif farm.get_equipment(equipment.id) is not None:
        raise ValueError(f"Equipment '{equipment.id}' already exists")
    farm.equipment.append(equipment)
    save_farm(filename, farm)
    logger.info("Added equipment %s (%s)", equipment.id, equipment.name)
    return equipment


def update_equipment(filename: PathLike, equipment_id: str, **fields) -> Equipment:
    """
    Update descriptive fields (name, make, model, hours, ...) of equipment.

    Only the keyword arguments given are changed. Items and history are
    left alone.
    """
    allowed = {
        "name", "equipment_type", "make", "model", "year",
        "serial_number", "hours", "notes",
    }
    unknown = set(fields) - allowed
    if unknown:
        raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    farm = load_farm(filename)
    eq = _require(farm.get_equipment(equipment_id), "Equipment", equipment_id)
    for key, value in fields.items():
        setattr(eq, key, value)
    save_farm(filename, farm)
    logger.info("Updated equipment %s: %s", equipment_id, ", ".join(sorted(fields)))
    return eq


def delete_equipment(filename: PathLike, equipment_id: str) -> None:
    """Remove equipment together with its schedule entries and issues."""
    farm = load_farm(filename)
    eq = _require(farm.get_equipment(equipment_id), "Equipment", equipment_id)
    farm.equipment.remove(eq)
    farm.schedules = [s for s in farm.schedules if s.equipment_id != equipment_id]
    farm.issues = [i for i in farm.issues if i.equipment_id != equipment_id]
    save_farm(filename, farm)
    logger.info("Deleted equipment %s", equipment_id)


def add_maintenance_item(
    filename: PathLike, equipment_id: str, item: MaintenanceItem
) -> MaintenanceItem:
    farm = load_farm(filename)
    eq = _require(farm.get_equipment(equipment_id), "Equipment", equipment_id)
    eq.add_item(item)
    save_farm(filename, farm)
    logger.info("Added item '%s' to %s", item.name, equipment_id)
    return item


def remove_maintenance_item(filename: PathLike, equipment_id: str, item_name: str) -> None:
    farm = load_farm(filename)
    eq = _require(farm.get_equipment(equipment_id), "Equipment", equipment_id)
    eq.remove_item(item_name)
    save_farm(filename, farm)
    logger.info("Removed item '%s' from %s", item_name, equipment_id)


def log_maintenance(
    filename: PathLike,
    equipment_id: str,
    item_name: str,
    on: date,
    hours: Optional[float] = None,
    performed_by: Optional[str] = None,
    notes: Optional[str] = None,
    cost: Optional[float] = None,
) -> MaintenanceRecord:
    """Log completed maintenance and update the item's last completed date."""
    farm = load_farm(filename)
    eq = _require(farm.get_equipment(equipment_id), "Equipment", equipment_id)
    if eq.get_item(item_name) is None:
        raise KeyError(f"Item '{item_name}' not found on {equipment_id}")
    record = eq.log_maintenance(item_name, on, hours, performed_by, notes, cost)
    save_farm(filename, farm)
    logger.info("Logged '%s' on %s for %s", record.item_name, on.isoformat(), equipment_id)
    return record


def add_template(filename: PathLike, template: MaintenanceTemplate) -> MaintenanceTemplate:
    farm = load_farm(filename)
    if not template.id:
        template.id = farm.new_id("tpl")
    elif farm.get_template(template.id) is not None:
        raise ValueError(f"Template '{template.id}' already exists")
    farm.templates.append(template)
    save_farm(filename, farm)
    logger.info("Added template %s (%s)", template.id, template.name)
    return template


def delete_template(filename: PathLike, template_id: str) -> None:
    farm = load_farm(filename)
    tpl = _require(farm.get_template(template_id), "Template", template_id)
    farm.templates.remove(tpl)
    save_farm(filename, farm)
    logger.info("Deleted template %s", template_id)


def apply_template(filename: PathLike, template_id: str, equipment_id: str) -> List[str]:
    """Apply a template's tasks to equipment. Returns the item names added."""
    farm = load_farm(filename)
    tpl = _require(farm.get_template(template_id), "Template", template_id)
    eq = _require(farm.get_equipment(equipment_id), "Equipment", equipment_id)
    added = tpl.apply_to(eq)
    if added:
        save_farm(filename, farm)
    logger.info("Applied template %s to %s: %d item(s) added", template_id, equipment_id, len(added))
    return added


def add_schedule_entry(filename: PathLike, entry: ScheduleEntry) -> ScheduleEntry:
    farm = load_farm(filename)
    eq = _require(farm.get_equipment(entry.equipment_id), "Equipment", entry.equipment_id)
    if entry.item_name and eq.get_item(entry.item_name) is None:
        raise KeyError(f"Item '{entry.item_name}' not found on {entry.equipment_id}")
    if not entry.id:
        entry.id = farm.new_id("sch")
    elif farm.get_schedule(entry.id) is not None:
        raise ValueError(f"Schedule entry '{entry.id}' already exists")
    farm.schedules.append(entry)
    save_farm(filename, farm)
    logger.info("Scheduled %s for %s on %s", entry.id, entry.equipment_id, entry.scheduled_date)
    return entry


def complete_schedule_entry(
    filename: PathLike, schedule_id: str, on: date, log: bool = True
) -> ScheduleEntry:
    """
    Mark a schedule entry completed.

    When the entry names a maintenance item and ``log`` is set, the item is
    also logged as completed on ``on``. Completing an entry twice raises
    ValueError so the item is never logged a second time.
    """
    farm = load_farm(filename)
    entry = _require(farm.get_schedule(schedule_id), "Schedule entry", schedule_id)
    if entry.completed:
        raise ValueError(f"Schedule entry '{schedule_id}' is already completed")
    entry.completed = True
    if log and entry.item_name:
        eq = _require(farm.get_equipment(entry.equipment_id), "Equipment", entry.equipment_id)
        if eq.get_item(entry.item_name) is not None:
            eq.log_maintenance(
                entry.item_name, on, performed_by=entry.assigned_to, notes=entry.notes
            )
    save_farm(filename, farm)
    logger.info("Completed schedule entry %s", schedule_id)
    return entry


def delete_schedule_entry(filename: PathLike, schedule_id: str) -> None:
    farm = load_farm(filename)
    entry = _require(farm.get_schedule(schedule_id), "Schedule entry", schedule_id)
    farm.schedules.remove(entry)
    save_farm(filename, farm)
    logger.info("Deleted schedule entry %s", schedule_id)


def add_issue(filename: PathLike, issue: Issue) -> Issue:
    farm = load_farm(filename)
    _require(farm.get_equipment(issue.equipment_id), "Equipment", issue.equipment_id)
    if not issue.id:
        issue.id = farm.new_id("iss")
    elif farm.get_issue(issue.id) is not None:
        raise ValueError(f"Issue '{issue.id}' already exists")
    farm.issues.append(issue)
    save_farm(filename, farm)
    logger.info("Reported issue %s on %s: %s", issue.id, issue.equipment_id, issue.title)
    return issue


def update_issue_state(
    filename: PathLike,
    issue_id: str,
    state: str,
    on: Optional[date] = None,
    resolution: Optional[str] = None,
) -> Issue:
    farm = load_farm(filename)
    issue = _require(farm.get_issue(issue_id), "Issue", issue_id)
    if state.lower() == "resolved":
        issue.resolve(on or date.today(), resolution)
    else:
        issue.set_state(state)
    save_farm(filename, farm)
    logger.info("Issue %s is now %s", issue_id, issue.state)
    return issue


def delete_issue(filename: PathLike, issue_id: str) -> None:
    farm = load_farm(filename)
    issue = _require(farm.get_issue(issue_id), "Issue", issue_id)
    farm.issues.remove(issue)
    save_farm(filename, farm)
    logger.info("Deleted issue %s", issue_id)
