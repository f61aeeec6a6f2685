"""Issue class for problems reported against equipment."""
from datetime import date
from typing import Optional

PRIORITIES = ["high", "medium", "low"]
STATES = ["open", "in_progress", "resolved"]


class Issue:
    """A problem reported on a piece of equipment."""

    def __init__(
            self,
            id: str,
            equipment_id: str,
            title: str,
            reported_date: date,
            description: Optional[str] = None,
            priority: str = "medium",
            state: str = "open",
            reported_by: Optional[str] = None,
            resolved_date: Optional[date] = None,
            resolution: Optional[str] = None,
    ):
        priority = (priority or "medium").lower()
        state = (state or "open").lower()
        if priority not in PRIORITIES:
            raise ValueError(f"Unknown priority '{priority}' (expected one of {', '.join(PRIORITIES)})")
        if state not in STATES:
            raise ValueError(f"Unknown state '{state}' (expected one of {', '.join(STATES)})")
        self.id = id
        self.equipment_id = equipment_id
        self.title = title
        self.reported_date = reported_date
        self.description = description
        self.priority = priority
        self.state = state
        self.reported_by = reported_by
        self.resolved_date = resolved_date
        self.resolution = resolution

    @property
    def is_open(self) -> bool:
        return self.state != "resolved"

    @property
    def priority_rank(self) -> int:
        """0 for high, 2 for low."""
        return PRIORITIES.index(self.priority)

    def set_state(self, state: str, on: Optional[date] = None) -> None:
        """Move to a new state. Resolving needs a date; leaving resolved clears it."""
        state = state.lower()
        if state not in STATES:
            raise ValueError(f"Unknown state '{state}' (expected one of {', '.join(STATES)})")
        if state == "resolved":
            if on is None:
                raise ValueError("A resolved date is required")
            self.resolved_date = on
        else:
            self.resolved_date = None
            self.resolution = None
        self.state = state

    def resolve(self, on: date, resolution: Optional[str] = None) -> None:
        self.set_state("resolved", on)
        self.resolution = resolution

    def reopen(self) -> None:
        self.set_state("open")
