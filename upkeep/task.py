"""MaintenanceTask dataclass for tracked maintenance obligations."""

import uuid
from dataclasses import dataclass
from typing import Optional

from .periodicity import Periodicity
from .status import TaskStatus


def new_task_id() -> str:
    """Generate a unique task id."""
    return uuid.uuid4().hex


@dataclass
class MaintenanceTask:
    """
    A single maintenance obligation.

    Dates are ISO calendar dates ('2024-01-01'), timestamps are ISO 8601
    strings. A recurring series is a chain of records: each completion
    leaves the serviced record behind and appends the next one.
    """

    id: str
    name: str
    category: str
    last_date: str
    created_at: str
    next_date: Optional[str] = None
    periodicity: Periodicity = Periodicity.NONE
    cost: Optional[float] = None
    notifications_enabled: bool = True
    status: TaskStatus = TaskStatus.PENDING
    completed_at: Optional[str] = None
    description: str = ""

    @property
    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def done_date(self) -> str:
        """When the service was performed: completion time, else last date."""
        return self.completed_at or self.last_date
