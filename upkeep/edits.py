"""
Record editing: adding, replacing and deleting tasks.

Edits are whole-record replacements. The one exception is an edit that
flips a pending task to completed: that goes through the recurrence
engine so the successor is spawned the same way as a "complete" action.
"""

from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional

from .calculations import format_timestamp
from .periodicity import Periodicity
from .recurrence import complete, find_task
from .status import TaskStatus
from .task import MaintenanceTask, new_task_id


def new_task(
    name: str,
    category: str,
    last_date: str,
    now: datetime,
    next_date: Optional[str] = None,
    periodicity: Periodicity = Periodicity.NONE,
    cost: Optional[float] = None,
    notifications_enabled: bool = True,
    description: str = "",
    new_id: Callable[[], str] = new_task_id,
) -> MaintenanceTask:
    """Create a pending task with a fresh id and creation timestamp."""
    return MaintenanceTask(
        id=new_id(),
        name=name,
        category=category,
        last_date=last_date,
        created_at=format_timestamp(now),
        next_date=next_date,
        periodicity=periodicity,
        cost=cost,
        notifications_enabled=notifications_enabled,
        description=description,
    )


def _check_cost(task: MaintenanceTask) -> None:
    if task.cost is not None and task.cost < 0:
        raise ValueError(f"Cost must not be negative (got {task.cost})")


def add_task(
    tasks: List[MaintenanceTask],
    task: MaintenanceTask,
    now: datetime,
    new_id: Callable[[], str] = new_task_id,
) -> List[MaintenanceTask]:
    """
    Append a new task. Returns a new list.

    A task entered as already completed is appended as pending and then
    completed, so its successor is spawned.
    """
    _check_cost(task)
    if find_task(tasks, task.id) is not None:
        raise ValueError(f"Duplicate task id '{task.id}'")
    if task.is_completed:
        pending = replace(task, status=TaskStatus.PENDING, completed_at=None)
        return complete(task.id, [*tasks, pending], now, new_id)
    return [*tasks, task]


def replace_task(
    tasks: List[MaintenanceTask],
    task: MaintenanceTask,
    now: datetime,
    new_id: Callable[[], str] = new_task_id,
) -> List[MaintenanceTask]:
    """
    Replace the record with the same id. Returns a new list.

    Raises KeyError if no record has that id.
    """
    _check_cost(task)
    index = find_task(tasks, task.id)
    if index is None:
        raise KeyError(f"Unknown task id '{task.id}'")

    current = tasks[index]
    result = list(tasks)
    if task.is_completed and current.is_pending:
        result[index] = replace(task, status=TaskStatus.PENDING, completed_at=None)
        return complete(task.id, result, now, new_id)

    if task.is_pending:
        # Reopened or still open: no completion time
        task = replace(task, completed_at=None)
    else:
        task = replace(task, completed_at=task.completed_at or current.completed_at)
    result[index] = task
    return result


def delete_task(tasks: List[MaintenanceTask], task_id: str) -> List[MaintenanceTask]:
    """Remove a task by id. Raises KeyError if no record has that id."""
    if find_task(tasks, task_id) is None:
        raise KeyError(f"Unknown task id '{task_id}'")
    return [t for t in tasks if t.id != task_id]
