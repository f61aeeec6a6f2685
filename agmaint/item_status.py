"""ItemStatus dataclass for calculated maintenance status."""

from dataclasses import dataclass
from datetime import date
from typing import Optional, TYPE_CHECKING

from .status import Status

if TYPE_CHECKING:
    from .equipment import Equipment
    from .maintenance_item import MaintenanceItem


@dataclass
class ItemStatus:
    """Calculated due information for one maintenance item."""

    equipment: "Equipment"
    item: "MaintenanceItem"
    status: Status
    due_date: Optional[date] = None
    days_until_due: Optional[int] = None

    @property
    def is_due(self) -> bool:
        return self.status in (Status.PAST_DUE, Status.COMING_DUE)
