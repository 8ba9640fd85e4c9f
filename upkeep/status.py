"""Status enums for task lifecycle, derived urgency and alert tiers."""

from enum import Enum


class TaskStatus(Enum):
    """Stored lifecycle state of a single task record."""

    PENDING = "pending"
    COMPLETED = "completed"


class Urgency(Enum):
    """Derived urgency categories. Lower value = more urgent."""

    OVERDUE = 1
    DUE_SOON = 2
    OK = 3
    COMPLETED = 4  # Record already serviced, no longer tracked


class Tier(Enum):
    """Notification tiers used for badges and alert styling."""

    DANGER = "danger"
    WARNING = "warning"
