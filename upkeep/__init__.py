"""
Recurring maintenance tracking.

This package provides the models and engines for tracking upkeep tasks:
- TaskStatus / Urgency / Tier: stored state, derived urgency, alert tiers
- Periodicity: Recurrence rules and their calendar intervals
- MaintenanceTask: A tracked maintenance obligation
- CategoryDefinition: Display categories referenced by tasks
- Notification / DashboardStats: Classifier output
- complete: Recurrence engine (mark done, spawn next occurrence)
- classify / days_remaining: Urgency classifier
"""

from .status import TaskStatus, Urgency, Tier
from .periodicity import Periodicity
from .task import MaintenanceTask, new_task_id
from .category import CategoryDefinition, CategoryInUseError
from .notification import Notification, DashboardStats
from .calculations import NEVER_DUE, calc_next_due, days_remaining, parse_date
from .recurrence import complete, successor_dates
from .classifier import (
    classify,
    critical_tasks,
    dashboard_stats,
    group_by_category,
    is_overdue,
    sort_by_due,
    urgency,
)
from .loader import YamlTaskRepository, load_tasks, save_tasks

__all__ = [
    "TaskStatus",
    "Urgency",
    "Tier",
    "Periodicity",
    "MaintenanceTask",
    "new_task_id",
    "CategoryDefinition",
    "CategoryInUseError",
    "Notification",
    "DashboardStats",
    "NEVER_DUE",
    "calc_next_due",
    "days_remaining",
    "parse_date",
    "complete",
    "successor_dates",
    "classify",
    "critical_tasks",
    "dashboard_stats",
    "group_by_category",
    "is_overdue",
    "sort_by_due",
    "urgency",
    "YamlTaskRepository",
    "load_tasks",
    "save_tasks",
]
