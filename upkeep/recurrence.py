"""
Recurrence engine: completing tasks and spawning their next occurrence.

Completion never deletes. The serviced record is kept as history with
status COMPLETED, and a recurring task gets a fresh PENDING successor
appended to the collection. Functions here take the collection as a
value and return a new list; persistence is up to the caller.
"""

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, List, Optional, Tuple

from .calculations import calc_next_due, format_timestamp, parse_date
from .periodicity import Periodicity
from .status import TaskStatus
from .task import MaintenanceTask, new_task_id

logger = logging.getLogger(__name__)


def find_task(tasks: List[MaintenanceTask], task_id: str) -> Optional[int]:
    """Index of the task with the given id, or None."""
    for index, task in enumerate(tasks):
        if task.id == task_id:
            return index
    return None


def successor_dates(task: MaintenanceTask) -> Optional[Tuple[date, date]]:
    """
    Dates for the occurrence after this task: (serviced date, next due).

    The serviced date is next_date if set, otherwise last_date. Returns
    None for NONE and CUSTOM periodicity, and when the base date can't
    be parsed.
    """
    if task.periodicity in (Periodicity.NONE, Periodicity.CUSTOM):
        return None
    base = parse_date(task.next_date if task.next_date else task.last_date)
    next_due = calc_next_due(base, task.periodicity)
    if next_due is None:
        return None
    return base, next_due


def spawn_successor(
    task: MaintenanceTask,
    now: datetime,
    new_id: Callable[[], str] = new_task_id,
) -> Optional[MaintenanceTask]:
    """Build the next PENDING occurrence of a recurring task, if any."""
    dates = successor_dates(task)
    if dates is None:
        return None
    base, next_due = dates
    return replace(
        task,
        id=new_id(),
        created_at=format_timestamp(now),
        last_date=base.isoformat(),
        next_date=next_due.isoformat(),
        status=TaskStatus.PENDING,
        completed_at=None,
    )


def complete(
    task_id: str,
    tasks: List[MaintenanceTask],
    now: datetime,
    new_id: Callable[[], str] = new_task_id,
) -> List[MaintenanceTask]:
    """
    Mark a task completed and append its successor when it recurs.

    Unknown ids and already completed tasks are a no-op: the input list
    is returned as-is.
    """
    index = find_task(tasks, task_id)
    if index is None:
        logger.debug("complete: no task with id %s, nothing to do", task_id)
        return tasks

    target = tasks[index]
    if target.is_completed:
        logger.debug("complete: task %s already completed", task_id)
        return tasks

    result = list(tasks)
    result[index] = replace(
        target, status=TaskStatus.COMPLETED, completed_at=format_timestamp(now)
    )

    successor = spawn_successor(target, now, new_id)
    if successor is not None:
        result.append(successor)
        logger.debug(
            "complete: task %s recurs (%s), next %s due %s",
            task_id,
            target.periodicity.value,
            successor.id,
            successor.next_date,
        )
    return result
