"""Shared fixtures: a small farm document on disk."""

import pytest

FARM_YAML = """
farm:
  name: Hillside Farm
equipment:
  - id: eq-tractor
    name: North Tractor
    equipmentType: tractor
    make: John Deere
    model: 6120M
    year: 2019
    hours: 1400.0
    items:
      - name: Engine oil
        intervalDays: 90
        lastCompletedDate: '2026-06-01'
      - name: Grease fittings
        intervalDays: 7
    history:
      - item: Engine oil
        date: '2026-06-01'
        hours: 1400.0
        performedBy: Sam
        cost: 86.4
  - id: eq-combine
    name: Combine
    equipmentType: combine
    items:
      - name: Header gearbox oil
        intervalDays: 180
templates:
  - id: tpl-tractor
    name: Tractor basics
    equipmentType: tractor
    tasks:
      - name: Engine oil
        intervalDays: 90
      - name: Air filter
        intervalDays: 30
        notes: Blow out with compressed air
schedules:
  - id: sch-1
    equipmentId: eq-combine
    itemName: Header gearbox oil
    scheduledDate: '2026-06-20'
    assignedTo: Riley
issues:
  - id: iss-1
    equipmentId: eq-combine
    title: Feeder chain rattling
    priority: high
    state: open
    reportedDate: '2026-06-10'
"""


@pytest.fixture
def farm_file(tmp_path):
    path = tmp_path / "farm.yaml"
    path.write_text(FARM_YAML)
    return path
