#!/usr/bin/env python3
"""
Unified CLI for farm equipment maintenance tracking.

Commands:
  status         - Show which maintenance items are past due, coming due, or on schedule
  equipment      - List equipment with a status summary
  history        - View maintenance history for a piece of equipment
  log            - Log completed maintenance
  templates      - List maintenance templates
  apply-template - Add a template's tasks to a piece of equipment
  schedule       - Show upcoming scheduled work
  issues         - List reported issues
  report-issue   - Report a new issue
  resolve-issue  - Mark an issue resolved
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from agmaint import (
    Issue,
    ItemStatus,
    MaintenanceRecord,
    PRIORITIES,
    Status,
    apply_template,
    add_issue,
    load_farm,
    log_maintenance,
    parse_date,
    settings,
    update_issue_state,
)

logger = logging.getLogger("maint")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_days(days: Optional[int]) -> str:
    """Format a day count for display (e.g., 'in 3d', '10d late', 'today')."""
    if days is None:
        return "never done"
    if days == 0:
        return "today"
    if days < 0:
        return f"{abs(days)}d late"
    return f"in {days}d"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def format_hours(hours: Optional[float]) -> str:
    """Format an hour meter reading for display."""
    return f"{hours:,.1f} h" if hours is not None else "-"


def format_date(value: Optional[date]) -> str:
    return value.isoformat() if value is not None else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text to max_len characters, adding ellipsis if needed."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def non_negative_float(value: str) -> float:
    """argparse type for meter readings and costs."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number")
    if number < 0:
        raise argparse.ArgumentTypeError(f"{value} must not be negative")
    return number


def _error(message: str) -> int:
    print(f"Error: {message}")
    return 1


def _key_message(e: KeyError) -> str:
    return e.args[0] if e.args else str(e)


# =============================================================================
# Status command
# =============================================================================


def make_status_table(statuses: List[ItemStatus]) -> List[List[str]]:
    """Convert item statuses to table rows."""
    rows = []
    for s in statuses:
        rows.append(
            [
                s.equipment.name,
                s.item.name,
                f"{s.item.interval_days}d",
                format_date(s.item.last_completed_date),
                format_date(s.due_date),
                format_days(s.days_until_due),
            ]
        )
    return rows


def cmd_status(args):
    """Show which maintenance items are past due, coming due, or on schedule."""
    farm = load_farm(args.farm_file)
    today = date.today()

    if args.equipment:
        eq = farm.get_equipment(args.equipment)
        if eq is None:
            return _error(f"Unknown equipment '{args.equipment}'")
        statuses = eq.get_all_item_status(today)
    else:
        statuses = farm.get_all_item_status(today)

    wanted = None
    if args.status:
        wanted = Status[args.status.upper()]

    print(f"Farm: {farm.name}")
    print(f"As of: {today.isoformat()}")
    print(f"Equipment: {len(farm.equipment)}")
    print()

    headers = ["Equipment", "Item", "Every", "Last Done", "Due", "When"]
    shown = 0
    for status in Status:
        if wanted is not None and status != wanted:
            continue
        group = [s for s in statuses if s.status == status]
        if not group:
            continue
        shown += len(group)
        print(f"{status.label.upper()}:")
        print(tabulate(make_status_table(group), headers=headers, tablefmt="simple"))
        print()

    if shown == 0:
        print("No maintenance items found.")
    return 0


# =============================================================================
# Equipment command
# =============================================================================


def cmd_equipment(args):
    """List equipment with a status summary."""
    farm = load_farm(args.farm_file)
    today = date.today()

    rows = []
    for eq in sorted(farm.equipment, key=lambda e: e.name.lower()):
        counts = eq.status_counts(today)
        rows.append(
            [
                eq.id,
                eq.display_name,
                eq.equipment_type or "-",
                format_hours(eq.hours),
                counts[Status.PAST_DUE],
                counts[Status.COMING_DUE],
                counts[Status.ON_SCHEDULE],
                len(farm.open_issues(eq.id)),
            ]
        )

    print(f"Farm: {farm.name}")
    print()
    if not rows:
        print("No equipment found.")
        return 0
    headers = ["ID", "Equipment", "Type", "Hours", "Past Due", "Coming Due", "On Schedule", "Open Issues"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# History command
# =============================================================================


def make_history_table(records: List[MaintenanceRecord]) -> List[List[str]]:
    """Convert maintenance records to table rows."""
    rows = []
    for record in records:
        rows.append(
            [
                format_date(record.date),
                record.item_name,
                format_hours(record.hours),
                record.performed_by or "-",
                format_cost(record.cost),
                truncate(record.notes),
            ]
        )
    return rows


def cmd_history(args):
    """View maintenance history for a piece of equipment."""
    farm = load_farm(args.farm_file)
    eq = farm.get_equipment(args.equipment_id)
    if eq is None:
        return _error(f"Unknown equipment '{args.equipment_id}'")

    records = eq.get_history_sorted(sort_by=args.sort, reverse=not args.asc)
    if args.item:
        records = [r for r in records if args.item.lower() in r.item_name.lower()]

    total_cost = sum(r.cost for r in records if r.cost is not None)

    print(f"Equipment: {eq.display_name}")
    print(f"Total records: {len(eq.history)}")
    if args.item:
        print(f"Showing: {len(records)} (filtered)")
    if total_cost > 0:
        print(f"Total cost: ${total_cost:,.2f}")
    print()

    if not records:
        print("No history entries found.")
        return 0

    headers = ["Date", "Item", "Hours", "Performed By", "Cost", "Notes"]
    print(tabulate(make_history_table(records), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Log command
# =============================================================================


def cmd_log(args):
    """Log completed maintenance."""
    farm = load_farm(args.farm_file)
    eq = farm.get_equipment(args.equipment_id)
    if eq is None:
        return _error(f"Unknown equipment '{args.equipment_id}'")

    item = eq.get_item(args.item)
    if item is None:
        print(f"Error: Unknown item '{args.item}' on {eq.name}")
        print("\nAvailable items:")
        for i in sorted(eq.items, key=lambda i: i.name.lower()):
            print(f"  {i.name} (every {i.interval_days}d)")
        return 1

    try:
        on = parse_date(args.date) or date.today()
    except ValueError:
        return _error(f"Invalid date '{args.date}' (expected YYYY-MM-DD)")

    print(f"Logging maintenance in {args.farm_file}:")
    print(f"  Equipment: {eq.display_name}")
    print(f"  Item:      {item.name}")
    print(f"  Date:      {on.isoformat()}")
    if args.hours is not None:
        print(f"  Hours:     {args.hours:,.1f}")
    if args.by:
        print(f"  By:        {args.by}")
    if args.notes:
        print(f"  Notes:     {args.notes}")
    if args.cost is not None:
        print(f"  Cost:      ${args.cost:.2f}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    log_maintenance(
        args.farm_file, eq.id, item.name, on,
        hours=args.hours, performed_by=args.by, notes=args.notes, cost=args.cost,
    )
    print("Entry saved.")
    return 0


# =============================================================================
# Template commands
# =============================================================================


def cmd_templates(args):
    """List maintenance templates."""
    farm = load_farm(args.farm_file)

    print(f"Templates: {len(farm.templates)}")
    print()
    for tpl in sorted(farm.templates, key=lambda t: t.name.lower()):
        suffix = f" [{tpl.equipment_type}]" if tpl.equipment_type else ""
        print(f"{tpl.name}{suffix} (id: {tpl.id})")
        rows = [[t.name, f"{t.interval_days}d", truncate(t.notes)] for t in tpl.tasks]
        if rows:
            print(tabulate(rows, headers=["Task", "Every", "Notes"], tablefmt="simple"))
        else:
            print("  (no tasks)")
        print()
    return 0


def cmd_apply_template(args):
    """Add a template's tasks to a piece of equipment."""
    farm = load_farm(args.farm_file)
    tpl = farm.get_template(args.template_id)
    if tpl is None:
        return _error(f"Unknown template '{args.template_id}'")
    eq = farm.get_equipment(args.equipment_id)
    if eq is None:
        return _error(f"Unknown equipment '{args.equipment_id}'")

    if args.dry_run:
        added = tpl.apply_to(eq)
        print(f"Would add {len(added)} item(s) to {eq.name}:")
        for name in added:
            print(f"  {name}")
        print("(dry run - no changes made)")
        return 0

    added = apply_template(args.farm_file, tpl.id, eq.id)
    if not added:
        print(f"{eq.name} already has every task in '{tpl.name}'.")
        return 0
    print(f"Added {len(added)} item(s) to {eq.name}:")
    for name in added:
        print(f"  {name}")
    return 0


# =============================================================================
# Schedule command
# =============================================================================


def cmd_schedule(args):
    """Show upcoming scheduled work."""
    farm = load_farm(args.farm_file)
    today = date.today()
    entries = farm.upcoming_schedules(today, args.days)

    print(f"Scheduled work through {args.days} day(s) from {today.isoformat()}")
    print()
    if not entries:
        print("Nothing scheduled.")
        return 0

    rows = []
    for entry in entries:
        eq = farm.get_equipment(entry.equipment_id)
        rows.append(
            [
                entry.scheduled_date.isoformat(),
                format_days(entry.days_until(today)),
                eq.name if eq else entry.equipment_id,
                entry.item_name or "-",
                entry.assigned_to or "-",
                truncate(entry.notes),
            ]
        )
    headers = ["Date", "When", "Equipment", "Item", "Assigned To", "Notes"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Issue commands
# =============================================================================


def cmd_issues(args):
    """List reported issues."""
    farm = load_farm(args.farm_file)
    if args.all:
        issues = sorted(farm.issues, key=lambda i: (i.reported_date, i.id), reverse=True)
        if args.equipment:
            issues = [i for i in issues if i.equipment_id == args.equipment]
    else:
        issues = farm.open_issues(args.equipment)

    if not issues:
        print("No issues found.")
        return 0

    rows = []
    for issue in issues:
        eq = farm.get_equipment(issue.equipment_id)
        rows.append(
            [
                issue.id,
                issue.priority,
                issue.state,
                eq.name if eq else issue.equipment_id,
                truncate(issue.title, 40),
                issue.reported_date.isoformat(),
            ]
        )
    headers = ["ID", "Priority", "State", "Equipment", "Title", "Reported"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_report_issue(args):
    """Report a new issue."""
    farm = load_farm(args.farm_file)
    if farm.get_equipment(args.equipment_id) is None:
        return _error(f"Unknown equipment '{args.equipment_id}'")

    issue = add_issue(
        args.farm_file,
        Issue(
            id="",
            equipment_id=args.equipment_id,
            title=args.title,
            reported_date=date.today(),
            description=args.description,
            priority=args.priority,
            reported_by=args.by,
        ),
    )
    print(f"Reported issue {issue.id}: {issue.title}")
    return 0


def cmd_resolve_issue(args):
    """Mark an issue resolved."""
    try:
        issue = update_issue_state(
            args.farm_file, args.issue_id, "resolved",
            on=date.today(), resolution=args.resolution,
        )
    except KeyError as e:
        return _error(_key_message(e))
    print(f"Resolved issue {issue.id}: {issue.title}")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Farm equipment maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -f data/farm.yaml status
  %(prog)s status --status past_due
  %(prog)s equipment
  %(prog)s history eq-tractor --item oil
  %(prog)s log eq-tractor "engine oil" --hours 1520 --by Sam
  %(prog)s apply-template tpl-tractor eq-tractor
  %(prog)s schedule --days 30
  %(prog)s report-issue eq-combine "Header drive slipping" --priority high
""",
    )
    parser.add_argument(
        "-f", "--farm-file",
        type=Path,
        default=settings.FARM_FILE,
        help=f"Path to farm YAML file (default: {settings.FARM_FILE})",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Status subcommand
    status_parser = subparsers.add_parser(
        "status", help="Show which items are past due, coming due, or on schedule"
    )
    status_parser.add_argument("--equipment", type=str, help="Only this equipment ID")
    status_parser.add_argument(
        "--status",
        choices=[s.name.lower() for s in Status],
        help="Only items with this status",
    )

    subparsers.add_parser("equipment", help="List equipment with a status summary")

    # History subcommand
    history_parser = subparsers.add_parser("history", help="View maintenance history")
    history_parser.add_argument("equipment_id", type=str, help="Equipment ID")
    history_parser.add_argument(
        "--item",
        type=str,
        help="Filter to items containing text (case-insensitive, e.g., 'oil')",
    )
    history_parser.add_argument(
        "--sort",
        choices=["date", "item"],
        default="date",
        help="Sort order (default: date)",
    )
    history_parser.add_argument(
        "--asc",
        action="store_true",
        help="Sort ascending instead of descending",
    )

    # Log subcommand
    log_parser = subparsers.add_parser("log", help="Log completed maintenance")
    log_parser.add_argument("equipment_id", type=str, help="Equipment ID")
    log_parser.add_argument("item", type=str, help="Maintenance item name (e.g., 'engine oil')")
    log_parser.add_argument(
        "--date",
        type=str,
        help="Completion date in YYYY-MM-DD format (default: today)",
    )
    log_parser.add_argument("--hours", type=non_negative_float, help="Hour meter reading")
    log_parser.add_argument("--by", type=str, help="Who did the work")
    log_parser.add_argument("--notes", type=str, help="Notes about the work")
    log_parser.add_argument("--cost", type=non_negative_float, help="Cost of the work")
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be logged without saving",
    )

    subparsers.add_parser("templates", help="List maintenance templates")

    apply_parser = subparsers.add_parser(
        "apply-template", help="Add a template's tasks to equipment"
    )
    apply_parser.add_argument("template_id", type=str, help="Template ID")
    apply_parser.add_argument("equipment_id", type=str, help="Equipment ID")
    apply_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    schedule_parser = subparsers.add_parser("schedule", help="Show upcoming scheduled work")
    schedule_parser.add_argument(
        "--days",
        type=int,
        default=settings.SCHEDULE_WINDOW_DAYS,
        help=f"Look-ahead window in days (default: {settings.SCHEDULE_WINDOW_DAYS})",
    )

    issues_parser = subparsers.add_parser("issues", help="List reported issues")
    issues_parser.add_argument("--all", action="store_true", help="Include resolved issues")
    issues_parser.add_argument("--equipment", type=str, help="Only this equipment ID")

    report_parser = subparsers.add_parser("report-issue", help="Report a new issue")
    report_parser.add_argument("equipment_id", type=str, help="Equipment ID")
    report_parser.add_argument("title", type=str, help="Short description")
    report_parser.add_argument("--description", type=str, help="Details")
    report_parser.add_argument("--priority", choices=PRIORITIES, default="medium")
    report_parser.add_argument("--by", type=str, help="Who reported it")

    resolve_parser = subparsers.add_parser("resolve-issue", help="Mark an issue resolved")
    resolve_parser.add_argument("issue_id", type=str, help="Issue ID")
    resolve_parser.add_argument("--resolution", type=str, help="What fixed it")

    return parser


COMMANDS = {
    "status": cmd_status,
    "equipment": cmd_equipment,
    "history": cmd_history,
    "log": cmd_log,
    "templates": cmd_templates,
    "apply-template": cmd_apply_template,
    "schedule": cmd_schedule,
    "issues": cmd_issues,
    "report-issue": cmd_report_issue,
    "resolve-issue": cmd_resolve_issue,
}


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate farm file exists
    if not args.farm_file.exists():
        return _error(f"File not found: {args.farm_file}")

    logger.debug("Running %s on %s", args.command, args.farm_file)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main() or 0)
