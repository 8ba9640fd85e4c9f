"""
Urgency classifier: notification tiers, critical views and summary stats.

Everything is derived from the task collection and a reference "today";
nothing here is stored. Overdue is always computed from the due date,
never read from a saved status.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional

from .calculations import check_urgency, days_remaining, parse_date
from .category import CategoryDefinition
from .notification import DashboardStats, Notification
from .status import Tier, Urgency
from .task import MaintenanceTask

# Days ahead at which a pending task raises a "due soon" warning
SOON_DAYS = 3

# Window for the critical tasks view and "upcoming" counts
CRITICAL_DAYS = 7


def urgency(task: MaintenanceTask, today: date, soon_days: int = CRITICAL_DAYS) -> Urgency:
    """Derived urgency for a task as of today."""
    if task.is_completed:
        return Urgency.COMPLETED
    return check_urgency(days_remaining(task.next_date, today), soon_days)


def is_overdue(task: MaintenanceTask, today: date) -> bool:
    return task.is_pending and days_remaining(task.next_date, today) < 0


def make_notification(task: MaintenanceTask, days: int, soon_days: int) -> Optional[Notification]:
    """Build the notification for a task, or None if nothing to alert."""
    if days == 0:
        return Notification(
            id=f"today-{task.id}",
            task_id=task.id,
            title="Due today",
            message=f'Maintenance "{task.name}" is due today.',
            tier=Tier.DANGER,
            date=task.next_date,
            days=days,
        )
    if days < 0:
        return Notification(
            id=f"overdue-{task.id}",
            task_id=task.id,
            title="Overdue",
            message=f'Maintenance "{task.name}" is overdue by {abs(days)} days.',
            tier=Tier.DANGER,
            date=task.next_date,
            days=days,
        )
    if days <= soon_days:
        return Notification(
            id=f"soon-{task.id}",
            task_id=task.id,
            title="Due soon",
            message=f'Maintenance "{task.name}" is due in {days} days.',
            tier=Tier.WARNING,
            date=task.next_date,
            days=days,
        )
    return None


def classify(
    tasks: Iterable[MaintenanceTask], today: date, soon_days: int = SOON_DAYS
) -> List[Notification]:
    """
    Notifications for every pending task that is due soon, today, or late.

    Only pending tasks with notifications enabled and a next date are
    considered. Output follows input order.
    """
    notifications = []
    for task in tasks:
        if not (task.is_pending and task.notifications_enabled and task.next_date):
            continue
        notification = make_notification(
            task, days_remaining(task.next_date, today), soon_days
        )
        if notification is not None:
            notifications.append(notification)
    return notifications


def _due_sort_key(task: MaintenanceTask):
    due = parse_date(task.next_date)
    # Tasks without a due date sort last
    return (due is None, due or date.max)


def sort_by_due(tasks: Iterable[MaintenanceTask]) -> List[MaintenanceTask]:
    """Sort ascending by next date, earliest (most overdue) first."""
    return sorted(tasks, key=_due_sort_key)


def critical_tasks(
    tasks: Iterable[MaintenanceTask], today: date, within_days: int = CRITICAL_DAYS
) -> List[MaintenanceTask]:
    """Pending tasks due within the window (or overdue), earliest first."""
    return sort_by_due(
        t
        for t in tasks
        if t.is_pending and days_remaining(t.next_date, today) <= within_days
    )


def dashboard_stats(
    tasks: List[MaintenanceTask], today: date, soon_days: int = CRITICAL_DAYS
) -> DashboardStats:
    """
    Summary counts for the dashboard.

    total/upcoming/overdue count pending tasks only; total_cost sums
    every record, completed history included.
    """
    stats = DashboardStats()
    for task in tasks:
        stats.total_cost += task.cost or 0
        if not task.is_pending:
            continue
        stats.total += 1
        days = days_remaining(task.next_date, today)
        if days < 0:
            stats.overdue += 1
        elif days <= soon_days:
            stats.upcoming += 1
    return stats


def group_by_category(
    tasks: Iterable[MaintenanceTask],
    categories: Optional[Iterable[CategoryDefinition]] = None,
) -> Dict[str, List[MaintenanceTask]]:
    """
    Group pending tasks by category name.

    Registry categories come first in registry order (only those with
    tasks), then any unregistered names in first-seen order.
    """
    groups: Dict[str, List[MaintenanceTask]] = {}
    for task in tasks:
        if task.is_pending:
            groups.setdefault(task.category, []).append(task)

    if not categories:
        return groups

    ordered: Dict[str, List[MaintenanceTask]] = {}
    for category in categories:
        if category.name in groups:
            ordered[category.name] = groups.pop(category.name)
    ordered.update(groups)
    return ordered
