#!/usr/bin/env python3
"""Tests for YAML loading and saving utilities."""

from datetime import date

import pytest
import yaml

from agmaint import (
    Equipment,
    Farm,
    InvalidInterval,
    Issue,
    MaintenanceItem,
    MaintenanceTemplate,
    ScheduleEntry,
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
    delete_issue,
    delete_schedule_entry,
    delete_template,
    load_farm,
    log_maintenance,
    parse_date,
    remove_maintenance_item,
    save_farm,
    update_equipment,
    update_issue_state,
)

# =============================================================================
# parse_date tests
# =============================================================================


class TestParseDate:
    """Tests for parse_date."""

    def test_iso_string(self):
        assert parse_date("2026-06-01") == date(2026, 6, 1)

    def test_date_passes_through(self):
        assert parse_date(date(2026, 6, 1)) == date(2026, 6, 1)

    def test_blank_is_none(self):
        assert parse_date(None) is None
        assert parse_date("") is None

    def test_invalid_raises_value_error(self):
        with pytest.raises(ValueError):
            parse_date("not a date")


# =============================================================================
# load_farm / save_farm tests
# =============================================================================


class TestLoadFarm:
    """Tests for load_farm function."""

    def test_loads_all_collections(self, farm_file):
        farm = load_farm(farm_file)

        assert isinstance(farm, Farm)
        assert farm.name == "Hillside Farm"
        assert [e.id for e in farm.equipment] == ["eq-tractor", "eq-combine"]
        assert len(farm.templates) == 1
        assert len(farm.schedules) == 1
        assert len(farm.issues) == 1

    def test_equipment_fields(self, farm_file):
        eq = load_farm(farm_file).get_equipment("eq-tractor")
        assert isinstance(eq, Equipment)
        assert eq.make == "John Deere"
        assert eq.year == 2019
        assert eq.hours == 1400.0
        assert isinstance(eq.items[0], MaintenanceItem)
        assert eq.items[0].last_completed_date == date(2026, 6, 1)
        assert eq.items[1].last_completed_date is None
        assert eq.history[0].performed_by == "Sam"
        assert eq.history[0].date == date(2026, 6, 1)

    def test_template_schedule_issue_fields(self, farm_file):
        farm = load_farm(farm_file)
        tpl = farm.get_template("tpl-tractor")
        assert isinstance(tpl, MaintenanceTemplate)
        assert tpl.tasks[1].notes == "Blow out with compressed air"
        entry = farm.get_schedule("sch-1")
        assert isinstance(entry, ScheduleEntry)
        assert entry.scheduled_date == date(2026, 6, 20)
        assert entry.completed is False
        issue = farm.get_issue("iss-1")
        assert isinstance(issue, Issue)
        assert issue.priority == "high"
        assert issue.reported_date == date(2026, 6, 10)

    def test_unquoted_dates(self, tmp_path):
        """YAML parses bare dates itself; those load the same way."""
        path = tmp_path / "farm.yaml"
        path.write_text("""
farm: {name: Test}
equipment:
  - id: eq-1
    name: Mower
    items:
      - name: Blades
        intervalDays: 30
        lastCompletedDate: 2026-06-01
""")
        item = load_farm(path).equipment[0].items[0]
        assert item.last_completed_date == date(2026, 6, 1)

    def test_missing_sections_are_empty(self, tmp_path):
        path = tmp_path / "farm.yaml"
        path.write_text("farm:\n  name: Bare\n")
        farm = load_farm(path)
        assert farm.equipment == []
        assert farm.issues == []

    def test_invalid_interval_rejected(self, tmp_path):
        path = tmp_path / "farm.yaml"
        path.write_text("""
farm: {name: Test}
equipment:
  - id: eq-1
    name: Mower
    items:
      - name: Blades
        intervalDays: 0
""")
        with pytest.raises(InvalidInterval):
            load_farm(path)


class TestSaveFarm:
    """Tests for save_farm and create_farm."""

    def test_save_then_load_keeps_documents(self, farm_file, tmp_path):
        farm = load_farm(farm_file)
        out = tmp_path / "copy.yaml"
        save_farm(out, farm)

        again = load_farm(out)
        assert again.name == farm.name
        assert [e.id for e in again.equipment] == [e.id for e in farm.equipment]
        tractor = again.get_equipment("eq-tractor")
        assert tractor.get_item("Engine oil").last_completed_date == date(2026, 6, 1)
        assert tractor.history[0].cost == 86.4
        assert again.get_issue("iss-1").title == "Feeder chain rattling"

    def test_writes_camel_case_and_iso_strings(self, farm_file):
        farm = load_farm(farm_file)
        save_farm(farm_file, farm)
        data = yaml.safe_load(farm_file.read_text())
        item = data["equipment"][0]["items"][0]
        assert item["intervalDays"] == 90
        assert item["lastCompletedDate"] == "2026-06-01"
        assert data["schedules"][0]["equipmentId"] == "eq-combine"

    def test_omits_none_values(self, farm_file):
        save_farm(farm_file, load_farm(farm_file))
        data = yaml.safe_load(farm_file.read_text())
        assert "lastCompletedDate" not in data["equipment"][0]["items"][1]
        assert "serialNumber" not in data["equipment"][0]

    def test_create_farm(self, tmp_path):
        path = tmp_path / "sub" / "new.yaml"
        create_farm(path, "New Place")
        farm = load_farm(path)
        assert farm.name == "New Place"
        assert farm.equipment == []


# =============================================================================
# Equipment mutators
# =============================================================================


class TestEquipmentMutators:
    """Tests for add/update/delete equipment and items."""

    def test_add_equipment_generates_id(self, farm_file):
        eq = add_equipment(farm_file, Equipment(id="", name="Sprayer"))
        assert eq.id.startswith("eq-")
        assert load_farm(farm_file).get_equipment(eq.id).name == "Sprayer"

    def test_add_equipment_duplicate_id(self, farm_file):
        with pytest.raises(ValueError):
            add_equipment(farm_file, Equipment(id="eq-tractor", name="Other"))

    def test_update_equipment(self, farm_file):
        update_equipment(farm_file, "eq-tractor", hours=1500.0, notes="New tires")
        eq = load_farm(farm_file).get_equipment("eq-tractor")
        assert eq.hours == 1500.0
        assert eq.notes == "New tires"
        assert len(eq.items) == 2

    def test_update_equipment_unknown_field(self, farm_file):
        with pytest.raises(ValueError):
            update_equipment(farm_file, "eq-tractor", items=[])

    def test_update_missing_equipment(self, farm_file):
        with pytest.raises(KeyError):
            update_equipment(farm_file, "missing", hours=1.0)

    def test_delete_equipment_cascades(self, farm_file):
        delete_equipment(farm_file, "eq-combine")
        farm = load_farm(farm_file)
        assert farm.get_equipment("eq-combine") is None
        assert farm.schedules == []
        assert farm.issues == []

    def test_delete_missing_equipment(self, farm_file):
        with pytest.raises(KeyError):
            delete_equipment(farm_file, "missing")

    def test_add_and_remove_item(self, farm_file):
        add_maintenance_item(farm_file, "eq-combine", MaintenanceItem("Sieves", 365))
        assert load_farm(farm_file).get_equipment("eq-combine").get_item("sieves") is not None
        remove_maintenance_item(farm_file, "eq-combine", "Sieves")
        assert load_farm(farm_file).get_equipment("eq-combine").get_item("sieves") is None


class TestLogMaintenance:
    """Tests for log_maintenance."""

    def test_updates_item_and_appends_history(self, farm_file):
        log_maintenance(
            farm_file, "eq-tractor", "grease fittings", date(2026, 6, 14),
            hours=1410.0, performed_by="Sam",
        )
        eq = load_farm(farm_file).get_equipment("eq-tractor")
        assert eq.get_item("Grease fittings").last_completed_date == date(2026, 6, 14)
        assert eq.history[-1].item_name == "Grease fittings"
        assert eq.history[-1].hours == 1410.0
        assert eq.hours == 1410.0

    def test_unknown_item(self, farm_file):
        with pytest.raises(KeyError):
            log_maintenance(farm_file, "eq-tractor", "Coolant", date(2026, 6, 14))

    def test_unknown_equipment(self, farm_file):
        with pytest.raises(KeyError):
            log_maintenance(farm_file, "missing", "Engine oil", date(2026, 6, 14))

    def test_negative_cost_not_saved(self, farm_file):
        with pytest.raises(ValueError):
            log_maintenance(farm_file, "eq-tractor", "Engine oil", date(2026, 6, 10), cost=-50.0)
        eq = load_farm(farm_file).get_equipment("eq-tractor")
        assert len(eq.history) == 1
        assert eq.get_item("Engine oil").last_completed_date == date(2026, 6, 1)


# =============================================================================
# Template mutators
# =============================================================================


class TestTemplateMutators:
    """Tests for template add/delete/apply."""

    def test_add_template(self, farm_file):
        tpl = add_template(
            farm_file,
            MaintenanceTemplate("", "Combine prep", "combine", [TemplateTask("Sieves", 365)]),
        )
        assert tpl.id.startswith("tpl-")
        assert load_farm(farm_file).get_template(tpl.id).tasks[0].name == "Sieves"

    def test_delete_template(self, farm_file):
        delete_template(farm_file, "tpl-tractor")
        assert load_farm(farm_file).templates == []

    def test_apply_template(self, farm_file):
        added = apply_template(farm_file, "tpl-tractor", "eq-tractor")
        assert added == ["Air filter"]
        eq = load_farm(farm_file).get_equipment("eq-tractor")
        assert eq.get_item("Air filter").interval_days == 30
        # Existing item keeps its completion date
        assert eq.get_item("Engine oil").last_completed_date == date(2026, 6, 1)

    def test_apply_unknown_template(self, farm_file):
        with pytest.raises(KeyError):
            apply_template(farm_file, "missing", "eq-tractor")


# =============================================================================
# Schedule mutators
# =============================================================================


class TestScheduleMutators:
    """Tests for schedule entry add/complete/delete."""

    def test_add_schedule_entry(self, farm_file):
        entry = add_schedule_entry(
            farm_file, ScheduleEntry("", "eq-tractor", date(2026, 7, 1), item_name="Engine oil")
        )
        assert entry.id.startswith("sch-")
        assert load_farm(farm_file).get_schedule(entry.id).item_name == "Engine oil"

    def test_add_schedule_unknown_equipment(self, farm_file):
        with pytest.raises(KeyError):
            add_schedule_entry(farm_file, ScheduleEntry("", "missing", date(2026, 7, 1)))

    def test_add_schedule_unknown_item(self, farm_file):
        with pytest.raises(KeyError):
            add_schedule_entry(
                farm_file, ScheduleEntry("", "eq-tractor", date(2026, 7, 1), item_name="Coolant")
            )

    def test_complete_logs_item(self, farm_file):
        complete_schedule_entry(farm_file, "sch-1", date(2026, 6, 19))
        farm = load_farm(farm_file)
        assert farm.get_schedule("sch-1").completed is True
        combine = farm.get_equipment("eq-combine")
        assert combine.get_item("Header gearbox oil").last_completed_date == date(2026, 6, 19)
        assert combine.history[-1].performed_by == "Riley"

    def test_complete_without_logging(self, farm_file):
        complete_schedule_entry(farm_file, "sch-1", date(2026, 6, 19), log=False)
        combine = load_farm(farm_file).get_equipment("eq-combine")
        assert combine.get_item("Header gearbox oil").last_completed_date is None
        assert combine.history == []

    def test_complete_twice_rejected(self, farm_file):
        complete_schedule_entry(farm_file, "sch-1", date(2026, 6, 19))
        with pytest.raises(ValueError, match="already completed"):
            complete_schedule_entry(farm_file, "sch-1", date(2026, 6, 25))
        combine = load_farm(farm_file).get_equipment("eq-combine")
        assert len(combine.history) == 1
        assert combine.get_item("Header gearbox oil").last_completed_date == date(2026, 6, 19)

    def test_delete_schedule_entry(self, farm_file):
        delete_schedule_entry(farm_file, "sch-1")
        assert load_farm(farm_file).schedules == []


# =============================================================================
# Issue mutators
# =============================================================================


class TestIssueMutators:
    """Tests for issue add/update/delete."""

    def test_add_issue(self, farm_file):
        issue = add_issue(
            farm_file, Issue("", "eq-tractor", "Cab light out", date(2026, 6, 12), priority="low")
        )
        assert issue.id.startswith("iss-")
        assert load_farm(farm_file).get_issue(issue.id).priority == "low"

    def test_add_issue_unknown_equipment(self, farm_file):
        with pytest.raises(KeyError):
            add_issue(farm_file, Issue("", "missing", "Broken", date(2026, 6, 12)))

    def test_resolve_issue(self, farm_file):
        update_issue_state(farm_file, "iss-1", "resolved", on=date(2026, 6, 12), resolution="New chain")
        issue = load_farm(farm_file).get_issue("iss-1")
        assert issue.state == "resolved"
        assert issue.resolved_date == date(2026, 6, 12)
        assert issue.resolution == "New chain"

    def test_move_to_in_progress(self, farm_file):
        update_issue_state(farm_file, "iss-1", "in_progress")
        assert load_farm(farm_file).get_issue("iss-1").state == "in_progress"

    def test_invalid_state(self, farm_file):
        with pytest.raises(ValueError):
            update_issue_state(farm_file, "iss-1", "closed")

    def test_delete_issue(self, farm_file):
        delete_issue(farm_file, "iss-1")
        assert load_farm(farm_file).issues == []

    def test_delete_missing_issue(self, farm_file):
        with pytest.raises(KeyError):
            delete_issue(farm_file, "missing")
