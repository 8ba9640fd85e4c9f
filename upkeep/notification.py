"""Notification and DashboardStats dataclasses for classifier output."""

from dataclasses import dataclass

from .status import Tier


@dataclass
class Notification:
    """An alert raised for a pending task nearing or past its due date."""

    id: str
    task_id: str
    title: str
    message: str
    tier: Tier
    date: str
    days: int

    @property
    def is_danger(self) -> bool:
        return self.tier == Tier.DANGER


@dataclass
class DashboardStats:
    """Summary counts across the task collection."""

    total: int = 0
    upcoming: int = 0
    overdue: int = 0
    total_cost: float = 0.0
