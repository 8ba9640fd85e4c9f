"""Queries over completed history and the active task list."""

from datetime import date
from typing import List, Optional, Tuple

from .calculations import parse_date
from .classifier import sort_by_due
from .task import MaintenanceTask


def _in_range(value: Optional[date], start: Optional[date], end: Optional[date]) -> bool:
    if value is None:
        return True
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True


def completed_history(
    tasks: List[MaintenanceTask],
    category: Optional[str] = None,
    due_from: Optional[date] = None,
    due_to: Optional[date] = None,
    done_from: Optional[date] = None,
    done_to: Optional[date] = None,
    min_cost: Optional[float] = None,
    max_cost: Optional[float] = None,
) -> List[MaintenanceTask]:
    """
    Completed tasks, most recently completed first.

    Args:
        category: Exact category name
        due_from, due_to: Range on the scheduled (next) date, inclusive
        done_from, done_to: Range on the completion date, inclusive
        min_cost, max_cost: Cost range; a missing cost counts as 0
    """
    entries = []
    for task in tasks:
        if not task.is_completed:
            continue
        if category and task.category != category:
            continue
        if not _in_range(parse_date(task.next_date), due_from, due_to):
            continue
        if not _in_range(parse_date(task.done_date), done_from, done_to):
            continue
        cost = task.cost or 0
        if min_cost is not None and cost < min_cost:
            continue
        if max_cost is not None and cost > max_cost:
            continue
        entries.append(task)
    return sorted(entries, key=lambda t: t.done_date, reverse=True)


def total_cost(tasks: List[MaintenanceTask]) -> float:
    """Sum of recorded costs."""
    return sum(t.cost for t in tasks if t.cost is not None)


def recent_costs(tasks: List[MaintenanceTask], limit: int = 5) -> List[Tuple[str, float]]:
    """The last few costed records by service date, as (name, cost) pairs."""
    costed = [t for t in tasks if (t.cost or 0) > 0]
    costed.sort(key=lambda t: parse_date(t.last_date) or date.min)
    return [(t.name, t.cost) for t in costed[-limit:]]


def active_tasks(
    tasks: List[MaintenanceTask],
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> List[MaintenanceTask]:
    """Pending tasks matching category and name search, earliest due first."""
    needle = (search or "").lower()
    return sort_by_due(
        t
        for t in tasks
        if t.is_pending
        and (not category or t.category == category)
        and needle in t.name.lower()
    )
