"""Flask web application for farm equipment maintenance tracking."""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from flask import Flask, render_template, request, redirect, url_for, flash

from agmaint import (
    Equipment,
    InvalidInterval,
    Issue,
    MaintenanceItem,
    MaintenanceTemplate,
    PRIORITIES,
    STATES,
    ScheduleEntry,
    Status,
    TemplateTask,
    add_equipment,
    add_issue,
    add_maintenance_item,
    add_schedule_entry,
    add_template,
    apply_template,
    complete_schedule_entry,
    create_farm,
    delete_equipment,
    delete_schedule_entry,
    delete_template,
    load_farm,
    log_maintenance,
    parse_date,
    settings,
    update_issue_state,
    validate_interval,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = settings.SECRET_KEY
app.config["FARM_FILE"] = settings.FARM_FILE
app.config["SCHEDULE_WINDOW_DAYS"] = settings.SCHEDULE_WINDOW_DAYS


def get_farm_path() -> Path:
    """Farm document path, created empty on first use."""
    path = Path(app.config["FARM_FILE"])
    if not path.exists():
        logger.warning("Farm file %s not found, creating an empty one", path)
        create_farm(path, "My Farm")
    return path


def load_current_farm():
    return load_farm(get_farm_path())


# =============================================================================
# Form parsing (inputs are validated here, before reaching the models)
# =============================================================================


def form_text(name: str) -> Optional[str]:
    """Stripped form value, None when blank."""
    value = (request.form.get(name) or "").strip()
    return value or None


def form_float(name: str, minimum: Optional[float] = None) -> Optional[float]:
    value = form_text(name)
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"'{value}' is not a number")
    if minimum is not None and number < minimum:
        raise ValueError(f"{name.replace('_', ' ').capitalize()} must be at least {minimum:g}")
    return number


def form_int(name: str) -> Optional[int]:
    value = form_text(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"'{value}' is not a whole number")


def form_interval(name: str = "interval_days") -> int:
    """Positive whole number of days from the form."""
    value = form_int(name)
    if value is None:
        raise InvalidInterval("Interval (days) is required")
    return validate_interval(value)


def form_date(name: str, default: Optional[date] = None) -> Optional[date]:
    value = form_text(name)
    if value is None:
        return default
    try:
        return parse_date(value)
    except ValueError:
        raise ValueError(f"'{value}' is not a valid date")


# =============================================================================
# Template filters
# =============================================================================


def format_days(days):
    """Describe a day count relative to today."""
    if days is None:
        return "never done"
    if days == 0:
        return "due today"
    if days < 0:
        return f"{abs(days)} days late"
    return f"in {days} days"


def format_date(value):
    """Format date for display."""
    if value is None:
        return "—"
    return value.isoformat()


def status_color(status: Status) -> str:
    """Get Tailwind color classes for status."""
    colors = {
        Status.PAST_DUE: "bg-red-100 text-red-800 border-red-200",
        Status.COMING_DUE: "bg-yellow-100 text-yellow-800 border-yellow-200",
        Status.ON_SCHEDULE: "bg-green-100 text-green-800 border-green-200",
    }
    return colors.get(status, "bg-gray-100 text-gray-800")


def status_badge_color(status: Status) -> str:
    """Get Tailwind color classes for status badge."""
    colors = {
        Status.PAST_DUE: "bg-red-500 text-white",
        Status.COMING_DUE: "bg-yellow-500 text-white",
        Status.ON_SCHEDULE: "bg-green-500 text-white",
    }
    return colors.get(status, "bg-gray-500 text-white")


def status_label(status: Optional[Status]) -> str:
    return status.label if status is not None else "No items"


def priority_color(priority: str) -> str:
    colors = {
        "high": "bg-red-500 text-white",
        "medium": "bg-yellow-500 text-white",
        "low": "bg-gray-400 text-white",
    }
    return colors.get(priority, "bg-gray-400 text-white")


# Register template filters
app.jinja_env.filters["format_days"] = format_days
app.jinja_env.filters["format_date"] = format_date
app.jinja_env.filters["status_color"] = status_color
app.jinja_env.filters["status_badge_color"] = status_badge_color
app.jinja_env.filters["status_label"] = status_label
app.jinja_env.filters["priority_color"] = priority_color


def count_by_status(counts):
    """Status counts keyed for templates ('past_due', 'coming_due', 'on_schedule')."""
    return {status.name.lower(): n for status, n in counts.items()}


# =============================================================================
# Equipment
# =============================================================================


@app.route("/")
def index():
    """Dashboard showing all equipment."""
    farm = load_current_farm()
    today = date.today()
    status_filter = request.args.get("status", "").lower() or None

    rows = []
    for eq in farm.equipment:
        rows.append({
            "equipment": eq,
            "worst": eq.worst_status(today),
            "counts": count_by_status(eq.status_counts(today)),
            "open_issues": len(farm.open_issues(eq.id)),
        })

    if status_filter:
        status_map = {s.name.lower(): s for s in Status}
        if status_filter in status_map:
            rows = [r for r in rows if r["worst"] == status_map[status_filter]]

    # Most urgent first; equipment without items last
    rows.sort(key=lambda r: (r["worst"].value if r["worst"] else 99, r["equipment"].name.lower()))

    return render_template(
        "index.html",
        farm=farm,
        rows=rows,
        totals=count_by_status(farm.status_counts(today)),
        status_filter=status_filter,
        active_tab='equipment',
    )


@app.route("/equipment", methods=["POST"])
def create_equipment():
    """Handle add equipment form submission."""
    name = form_text("name")
    if not name:
        flash("Please enter a name", "error")
        return redirect(url_for("index"))

    try:
        eq = Equipment(
            id="",
            name=name,
            equipment_type=form_text("equipment_type"),
            make=form_text("make"),
            model=form_text("model"),
            year=form_int("year"),
            serial_number=form_text("serial_number"),
            hours=form_float("hours", minimum=0),
            notes=form_text("notes"),
        )
    except ValueError as e:
        flash(f"Invalid equipment: {e}", "error")
        return redirect(url_for("index"))

    eq = add_equipment(get_farm_path(), eq)
    flash(f"Added {eq.name}", "success")
    return redirect(url_for("equipment_detail", equipment_id=eq.id))


@app.route("/equipment/<equipment_id>")
def equipment_detail(equipment_id: str):
    """Equipment detail page with status table, history and issues."""
    farm = load_current_farm()
    eq = farm.get_equipment(equipment_id)
    if eq is None:
        flash(f"Equipment '{equipment_id}' not found", "error")
        return redirect(url_for("index"))

    today = date.today()
    all_status = eq.get_all_item_status(today)

    return render_template(
        "equipment.html",
        farm=farm,
        equipment=eq,
        all_status=all_status,
        status_counts=count_by_status(eq.status_counts(today)),
        history=eq.get_history_sorted(sort_by="date", reverse=True),
        issues=farm.open_issues(eq.id),
        templates=farm.templates,
        today=today.isoformat(),
        active_tab='equipment',
    )


@app.route("/equipment/<equipment_id>/delete", methods=["POST"])
def remove_equipment(equipment_id: str):
    try:
        delete_equipment(get_farm_path(), equipment_id)
    except KeyError:
        flash(f"Equipment '{equipment_id}' not found", "error")
        return redirect(url_for("index"))
    flash("Equipment deleted", "success")
    return redirect(url_for("index"))


@app.route("/equipment/<equipment_id>/items", methods=["POST"])
def create_item(equipment_id: str):
    """Handle add maintenance item form submission."""
    name = form_text("name")
    if not name:
        flash("Please enter an item name", "error")
        return redirect(url_for("equipment_detail", equipment_id=equipment_id))

    try:
        item = MaintenanceItem(
            name,
            form_interval(),
            last_completed_date=form_date("last_completed_date"),
            notes=form_text("notes"),
        )
        add_maintenance_item(get_farm_path(), equipment_id, item)
    except KeyError:
        flash(f"Equipment '{equipment_id}' not found", "error")
        return redirect(url_for("index"))
    except ValueError as e:
        flash(str(e), "error")
        return redirect(url_for("equipment_detail", equipment_id=equipment_id))

    flash(f"Added item: {name}", "success")
    return redirect(url_for("equipment_detail", equipment_id=equipment_id))


@app.route("/equipment/<equipment_id>/log", methods=["POST"])
def log_item(equipment_id: str):
    """Handle log maintenance form submission."""
    item_name = form_text("item_name")
    if not item_name:
        flash("Please select an item", "error")
        return redirect(url_for("equipment_detail", equipment_id=equipment_id))

    try:
        on = form_date("date", default=date.today())
        log_maintenance(
            get_farm_path(),
            equipment_id,
            item_name,
            on,
            hours=form_float("hours", minimum=0),
            performed_by=form_text("performed_by"),
            notes=form_text("notes"),
            cost=form_float("cost", minimum=0),
        )
    except KeyError as e:
        flash(e.args[0] if e.args else "Not found", "error")
        return redirect(url_for("index"))
    except ValueError as e:
        flash(str(e), "error")
        return redirect(url_for("equipment_detail", equipment_id=equipment_id))

    flash(f"Logged: {item_name}", "success")

    # Return updated status table for HTMX
    if request.headers.get("HX-Request"):
        farm = load_current_farm()
        eq = farm.get_equipment(equipment_id)
        today = date.today()
        all_status = eq.get_all_item_status(today)
        return render_template(
            "partials/status_table.html",
            equipment=eq,
            all_status=all_status,
            status_counts=count_by_status(eq.status_counts(today)),
            today=today.isoformat(),
        )

    return redirect(url_for("equipment_detail", equipment_id=equipment_id))


# =============================================================================
# Templates
# =============================================================================


@app.route("/templates")
def template_list():
    farm = load_current_farm()
    return render_template(
        "templates.html",
        farm=farm,
        templates=sorted(farm.templates, key=lambda t: t.name.lower()),
        equipment=sorted(farm.equipment, key=lambda e: e.name.lower()),
        active_tab='templates',
    )


@app.route("/templates", methods=["POST"])
def create_template():
    """
    Handle add template form submission.

    Tasks come from the ``tasks`` textarea, one per line as
    ``name, interval_days[, notes]``.
    """
    name = form_text("name")
    if not name:
        flash("Please enter a template name", "error")
        return redirect(url_for("template_list"))

    tasks = []
    try:
        for lineno, line in enumerate((request.form.get("tasks") or "").splitlines(), 1):
            if not line.strip():
                continue
            parts = [p.strip() for p in line.split(",", 2)]
            if len(parts) < 2:
                raise ValueError(f"Line {lineno}: expected 'name, interval_days'")
            try:
                interval = int(parts[1])
            except ValueError:
                raise InvalidInterval(f"Line {lineno}: '{parts[1]}' is not a whole number of days")
            tasks.append(TemplateTask(parts[0], interval, parts[2] if len(parts) > 2 else None))
    except ValueError as e:
        flash(str(e), "error")
        return redirect(url_for("template_list"))

    tpl = add_template(
        get_farm_path(),
        MaintenanceTemplate(id="", name=name, equipment_type=form_text("equipment_type"), tasks=tasks),
    )
    flash(f"Added template {tpl.name} ({len(tasks)} tasks)", "success")
    return redirect(url_for("template_list"))


@app.route("/templates/<template_id>/apply", methods=["POST"])
def apply_template_to_equipment(template_id: str):
    equipment_id = form_text("equipment_id")
    if not equipment_id:
        flash("Please select equipment", "error")
        return redirect(url_for("template_list"))

    try:
        added = apply_template(get_farm_path(), template_id, equipment_id)
    except KeyError as e:
        flash(e.args[0] if e.args else "Not found", "error")
        return redirect(url_for("template_list"))

    if added:
        flash(f"Added {len(added)} item(s): {', '.join(added)}", "success")
    else:
        flash("Equipment already has every task in this template", "info")
    return redirect(url_for("equipment_detail", equipment_id=equipment_id))


@app.route("/templates/<template_id>/delete", methods=["POST"])
def remove_template(template_id: str):
    try:
        delete_template(get_farm_path(), template_id)
    except KeyError:
        flash(f"Template '{template_id}' not found", "error")
        return redirect(url_for("template_list"))
    flash("Template deleted", "success")
    return redirect(url_for("template_list"))


# =============================================================================
# Schedule
# =============================================================================


@app.route("/schedules")
def schedule_list():
    farm = load_current_farm()
    today = date.today()
    show_all = request.args.get("all", "").lower() == "true"

    if show_all:
        entries = sorted(farm.schedules, key=lambda e: (e.scheduled_date, e.id))
    else:
        entries = farm.upcoming_schedules(today, app.config["SCHEDULE_WINDOW_DAYS"])

    return render_template(
        "schedules.html",
        farm=farm,
        entries=entries,
        equipment=sorted(farm.equipment, key=lambda e: e.name.lower()),
        today=today,
        window_days=app.config["SCHEDULE_WINDOW_DAYS"],
        show_all=show_all,
        active_tab='schedule',
    )


@app.route("/schedules", methods=["POST"])
def create_schedule():
    equipment_id = form_text("equipment_id")
    if not equipment_id:
        flash("Please select equipment", "error")
        return redirect(url_for("schedule_list"))

    try:
        scheduled = form_date("scheduled_date")
        if scheduled is None:
            raise ValueError("Please pick a date")
        entry = add_schedule_entry(
            get_farm_path(),
            ScheduleEntry(
                id="",
                equipment_id=equipment_id,
                scheduled_date=scheduled,
                item_name=form_text("item_name"),
                assigned_to=form_text("assigned_to"),
                notes=form_text("notes"),
            ),
        )
    except KeyError as e:
        flash(e.args[0] if e.args else "Not found", "error")
        return redirect(url_for("schedule_list"))
    except ValueError as e:
        flash(str(e), "error")
        return redirect(url_for("schedule_list"))

    flash(f"Scheduled for {entry.scheduled_date.isoformat()}", "success")
    return redirect(url_for("schedule_list"))


@app.route("/schedules/<schedule_id>/complete", methods=["POST"])
def finish_schedule(schedule_id: str):
    try:
        complete_schedule_entry(get_farm_path(), schedule_id, date.today())
    except KeyError:
        flash(f"Schedule entry '{schedule_id}' not found", "error")
        return redirect(url_for("schedule_list"))
    except ValueError as e:
        flash(str(e), "error")
        return redirect(url_for("schedule_list"))
    flash("Marked complete", "success")
    return redirect(url_for("schedule_list"))


@app.route("/schedules/<schedule_id>/delete", methods=["POST"])
def remove_schedule(schedule_id: str):
    try:
        delete_schedule_entry(get_farm_path(), schedule_id)
    except KeyError:
        flash(f"Schedule entry '{schedule_id}' not found", "error")
        return redirect(url_for("schedule_list"))
    flash("Schedule entry deleted", "success")
    return redirect(url_for("schedule_list"))


# =============================================================================
# Issues
# =============================================================================


@app.route("/issues")
def issue_list():
    farm = load_current_farm()
    show_all = request.args.get("all", "").lower() == "true"

    if show_all:
        issues = sorted(farm.issues, key=lambda i: (i.reported_date, i.id), reverse=True)
    else:
        issues = farm.open_issues()

    return render_template(
        "issues.html",
        farm=farm,
        issues=issues,
        equipment=sorted(farm.equipment, key=lambda e: e.name.lower()),
        priorities=PRIORITIES,
        states=STATES,
        show_all=show_all,
        active_tab='issues',
    )


@app.route("/issues", methods=["POST"])
def create_issue():
    equipment_id = form_text("equipment_id")
    title = form_text("title")
    if not equipment_id or not title:
        flash("Please select equipment and enter a title", "error")
        return redirect(url_for("issue_list"))

    try:
        issue = add_issue(
            get_farm_path(),
            Issue(
                id="",
                equipment_id=equipment_id,
                title=title,
                reported_date=date.today(),
                description=form_text("description"),
                priority=form_text("priority") or "medium",
                reported_by=form_text("reported_by"),
            ),
        )
    except KeyError as e:
        flash(e.args[0] if e.args else "Not found", "error")
        return redirect(url_for("issue_list"))
    except ValueError as e:
        flash(str(e), "error")
        return redirect(url_for("issue_list"))

    flash(f"Reported: {issue.title}", "success")
    return redirect(url_for("issue_list"))


@app.route("/issues/<issue_id>/state", methods=["POST"])
def change_issue_state(issue_id: str):
    state = form_text("state")
    if state not in STATES:
        flash("Please choose a valid state", "error")
        return redirect(url_for("issue_list"))

    try:
        issue = update_issue_state(
            get_farm_path(), issue_id, state,
            on=date.today(), resolution=form_text("resolution"),
        )
    except KeyError:
        flash(f"Issue '{issue_id}' not found", "error")
        return redirect(url_for("issue_list"))

    flash(f"{issue.title}: {issue.state.replace('_', ' ')}", "success")
    return redirect(request.referrer or url_for("issue_list"))


if __name__ == "__main__":
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Access from phone: use your computer's local IP (e.g., 192.168.1.x:5001)
    app.run(debug=settings.DEBUG, host=settings.HOST, port=settings.PORT)
