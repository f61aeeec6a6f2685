"""Status enum for maintenance urgency levels."""

from enum import Enum


class Status(Enum):
    """Maintenance status categories. Lower value = more urgent."""

    PAST_DUE = 1  # Never completed, or next-due date has passed
    COMING_DUE = 2
    ON_SCHEDULE = 3

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'Coming due'."""
        return self.name.replace("_", " ").capitalize()
