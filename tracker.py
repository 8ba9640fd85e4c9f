#!/usr/bin/env python3
"""
Unified CLI for recurring maintenance tracking.

Commands:
  status          - Dashboard summary, critical tasks and alerts
  list            - List pending tasks, earliest due first
  notifications   - Show due-today, overdue and due-soon alerts
  history         - View completed maintenance
  add             - Add a new maintenance task
  complete        - Mark a task done (schedules the next one if recurring)
  delete          - Delete a task
  categories      - List categories
  category-add    - Add a category
  category-delete - Delete an unused category
  export          - Write a JSON backup
  import          - Restore tasks and categories from a JSON backup
"""

import argparse
import logging
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from upkeep import (
    MaintenanceTask,
    Notification,
    Periodicity,
    Urgency,
    YamlTaskRepository,
    classify,
    complete,
    critical_tasks,
    dashboard_stats,
    days_remaining,
    urgency,
)
from upkeep.calculations import NEVER_DUE, parse_date
from upkeep.category import (
    CategoryDefinition,
    CategoryInUseError,
    category_in_use,
    delete_category,
    new_category_id,
    normalize_name,
    save_category,
)
from upkeep.config import load_settings
from upkeep.edits import add_task, delete_task, new_task
from upkeep.history import active_tasks, completed_history, total_cost
from upkeep.loader import BackupError, backup_filename, read_backup, write_backup
from upkeep.logging_setup import setup_logging
from upkeep.recurrence import find_task, successor_dates

# =============================================================================
# Formatting helpers
# =============================================================================


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def format_days(days: int) -> str:
    """Format days remaining for display (e.g., 'today', '5d', '-3d')."""
    if days == NEVER_DUE:
        return "-"
    if days == 0:
        return "today"
    return f"{days}d"


def format_urgency(value: Urgency) -> str:
    return value.name.replace("_", " ").lower()


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_day(value: Optional[str]) -> Optional[date]:
    """argparse type for YYYY-MM-DD dates."""
    if value is None:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid date '{value}' (expected YYYY-MM-DD)")
    return parsed


def parse_periodicity(value: str) -> Periodicity:
    text = value.strip().lower()
    for member in Periodicity:
        if text in (member.value, member.name.lower()):
            return member
    choices = ", ".join(p.value for p in Periodicity)
    raise argparse.ArgumentTypeError(f"invalid periodicity '{value}' (choose from {choices})")


def now_utc() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


# =============================================================================
# Table builders
# =============================================================================


def make_task_table(tasks: List[MaintenanceTask], today: date) -> List[List[str]]:
    """Convert pending tasks to table rows."""
    rows = []
    for task in tasks:
        rows.append(
            [
                task.id[:8],
                task.name,
                task.category,
                task.last_date,
                task.next_date or "-",
                format_days(days_remaining(task.next_date, today)),
                task.periodicity.label,
                format_cost(task.cost),
                format_urgency(urgency(task, today)),
            ]
        )
    return rows


def make_notification_table(notifications: List[Notification]) -> List[List[str]]:
    """Convert notifications to table rows."""
    return [
        [n.tier.value.upper(), n.title, n.date, n.message] for n in notifications
    ]


def make_history_table(tasks: List[MaintenanceTask]) -> List[List[str]]:
    """Convert completed tasks to table rows."""
    rows = []
    for task in tasks:
        rows.append(
            [
                task.done_date[:10],
                task.name,
                task.category,
                task.next_date or "-",
                format_cost(task.cost),
                truncate(task.description),
            ]
        )
    return rows


TASK_HEADERS = [
    "ID",
    "Name",
    "Category",
    "Last Done",
    "Next Due",
    "Remaining",
    "Repeats",
    "Cost",
    "Urgency",
]


# =============================================================================
# Helpers
# =============================================================================


def reference_day(args) -> date:
    return args.today or date.today()


def resolve_task_id(tasks: List[MaintenanceTask], prefix: str) -> Optional[str]:
    """Resolve a full or unique-prefix task id."""
    if find_task(tasks, prefix) is not None:
        return prefix
    matches = [t.id for t in tasks if t.id.startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    return None


# =============================================================================
# Status / list / notifications commands
# =============================================================================


def cmd_status(args, settings):
    """Dashboard summary, critical tasks and alerts."""
    repo = YamlTaskRepository(args.data)
    tasks = repo.load()
    today = reference_day(args)

    stats = dashboard_stats(tasks, today, soon_days=settings.critical_days)
    print(f"As of: {today.isoformat()}")
    print(f"Active tasks: {stats.total}")
    print(f"Upcoming (next {settings.critical_days} days): {stats.upcoming}")
    print(f"Overdue: {stats.overdue}")
    print(f"Total invested: {format_cost(stats.total_cost)}")
    print()

    critical = critical_tasks(tasks, today, within_days=settings.critical_days)
    if critical:
        print("CRITICAL:")
        print(tabulate(make_task_table(critical, today), headers=TASK_HEADERS, tablefmt="simple"))
        print()
    else:
        print("No critical tasks.")
        print()

    notifications = classify(tasks, today, soon_days=settings.soon_days)
    if notifications:
        print(f"ALERTS ({len(notifications)}):")
        for n in notifications:
            print(f"  [{n.tier.value.upper()}] {n.message}")
        print()

    return 0


def cmd_list(args, settings):
    """List pending tasks, earliest due first."""
    tasks = YamlTaskRepository(args.data).load()
    today = reference_day(args)

    entries = active_tasks(tasks, category=args.category, search=args.search)
    if not entries:
        print("No pending tasks found.")
        return 0

    print(tabulate(make_task_table(entries, today), headers=TASK_HEADERS, tablefmt="simple"))
    return 0


def cmd_notifications(args, settings):
    """Show due-today, overdue and due-soon alerts."""
    tasks = YamlTaskRepository(args.data).load()
    today = reference_day(args)

    notifications = classify(tasks, today, soon_days=settings.soon_days)
    if args.danger_only:
        notifications = [n for n in notifications if n.is_danger]

    if not notifications:
        print("No alerts.")
        return 0

    headers = ["Tier", "Title", "Due", "Message"]
    print(tabulate(make_notification_table(notifications), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# History command
# =============================================================================


def cmd_history(args, settings):
    """View completed maintenance."""
    tasks = YamlTaskRepository(args.data).load()

    entries = completed_history(
        tasks,
        category=args.category,
        done_from=args.since,
        done_to=args.until,
        min_cost=args.min_cost,
        max_cost=args.max_cost,
    )

    print(f"Completed services: {sum(1 for t in tasks if t.is_completed)}")
    if args.category or args.since or args.until or args.min_cost is not None or args.max_cost is not None:
        print(f"Showing: {len(entries)} (filtered)")
    cost = total_cost(entries)
    if cost > 0:
        print(f"Total cost: {format_cost(cost)}")
    print()

    if not entries:
        print("No history entries found.")
        return 0

    headers = ["Done", "Name", "Category", "Was Due", "Cost", "Notes"]
    print(tabulate(make_history_table(entries), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Add / complete / delete commands
# =============================================================================


def cmd_add(args, settings):
    """Add a new maintenance task."""
    repo = YamlTaskRepository(args.data)
    tasks = repo.load()
    now = now_utc()

    last_date = args.last_date or reference_day(args)
    task = new_task(
        name=args.name,
        category=args.category,
        last_date=last_date.isoformat(),
        now=now,
        next_date=args.next_date.isoformat() if args.next_date else None,
        periodicity=args.periodicity,
        cost=args.cost,
        notifications_enabled=not args.no_notify,
        description=args.notes or "",
    )

    print(f"Adding task to {args.data}:")
    print(f"  Name:     {task.name}")
    print(f"  Category: {task.category}")
    print(f"  Last:     {task.last_date}")
    print(f"  Next:     {task.next_date or '-'}")
    print(f"  Repeats:  {task.periodicity.label}")
    if task.cost is not None:
        print(f"  Cost:     {format_cost(task.cost)}")
    if not task.notifications_enabled:
        print("  Notifications: off")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    try:
        tasks = add_task(tasks, task, now)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    repo.save(tasks)
    print(f"Task saved (id {task.id}).")
    return 0


def cmd_complete(args, settings):
    """Mark a task done and schedule the next occurrence."""
    repo = YamlTaskRepository(args.data)
    tasks = repo.load()

    task_id = resolve_task_id(tasks, args.task_id)
    if task_id is None:
        print(f"Error: Unknown or ambiguous task id '{args.task_id}'")
        return 1

    task = tasks[find_task(tasks, task_id)]
    if task.is_completed:
        print(f"Task '{task.name}' is already completed ({task.completed_at}).")
        return 0

    print(f"Completing: {task.name}")
    dates = successor_dates(task)
    if dates:
        print(f"  Next occurrence due: {dates[1].isoformat()}")
    elif task.periodicity == Periodicity.CUSTOM:
        print("  Custom schedule: add the next occurrence manually.")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    repo.save(complete(task_id, tasks, now_utc()))
    print("Task completed.")
    return 0


def cmd_delete(args, settings):
    """Delete a task."""
    repo = YamlTaskRepository(args.data)
    tasks = repo.load()

    task_id = resolve_task_id(tasks, args.task_id)
    if task_id is None:
        print(f"Error: Unknown or ambiguous task id '{args.task_id}'")
        return 1

    name = tasks[find_task(tasks, task_id)].name
    if args.dry_run:
        print(f"Would delete: {name}")
        print("(dry run - no changes made)")
        return 0

    repo.save(delete_task(tasks, task_id))
    print(f"Deleted: {name}")
    return 0


# =============================================================================
# Category commands
# =============================================================================


def cmd_categories(args, settings):
    """List categories."""
    repo = YamlTaskRepository(args.data)
    tasks = repo.load()
    categories = repo.load_categories()

    rows = []
    for category in categories:
        pending = sum(
            1 for t in tasks if t.is_pending and normalize_name(t.category) == category.key
        )
        in_use = "yes" if category_in_use(category.name, tasks) else "no"
        rows.append([category.id, category.name, category.icon, pending, in_use])

    headers = ["ID", "Name", "Icon", "Pending", "In Use"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_category_add(args, settings):
    """Add a category."""
    repo = YamlTaskRepository(args.data)
    categories = repo.load_categories()

    if any(c.key == normalize_name(args.name) for c in categories):
        print(f"Error: Category '{args.name}' already exists")
        return 1

    category = CategoryDefinition(new_category_id(), args.name.strip(), args.icon, args.color)
    repo.save_categories(save_category(categories, category))
    print(f"Category added: {category.name}")
    return 0


def cmd_category_delete(args, settings):
    """Delete an unused category."""
    repo = YamlTaskRepository(args.data)
    tasks = repo.load()
    categories = repo.load_categories()

    target = next(
        (c for c in categories if c.id == args.category or c.key == normalize_name(args.category)),
        None,
    )
    if target is None:
        print(f"Error: Unknown category '{args.category}'")
        return 1

    try:
        categories = delete_category(categories, target.id, tasks)
    except CategoryInUseError as e:
        print(f"Error: {e}")
        return 1

    repo.save_categories(categories)
    print(f"Category deleted: {target.name}")
    return 0


# =============================================================================
# Backup commands
# =============================================================================


def cmd_export(args, settings):
    """Write a JSON backup."""
    repo = YamlTaskRepository(args.data)
    tasks = repo.load()
    categories = repo.load_categories()

    output = args.output or Path(backup_filename(reference_day(args)))
    write_backup(output, tasks, categories, now_utc())
    print(f"Backup written to {output} ({len(tasks)} tasks)")
    return 0


def cmd_import(args, settings):
    """Restore tasks and categories from a JSON backup."""
    try:
        tasks, categories = read_backup(args.backup_file)
    except BackupError as e:
        print(f"Error: {e}")
        return 1

    print(f"Backup contains {len(tasks)} tasks and {len(categories)} categories.")
    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    repo = YamlTaskRepository(args.data)
    repo.save_categories(categories)
    repo.save(tasks)
    print(f"Restored into {args.data}.")
    return 0


# =============================================================================
# Main
# =============================================================================

COMMANDS = {
    "status": cmd_status,
    "list": cmd_list,
    "notifications": cmd_notifications,
    "history": cmd_history,
    "add": cmd_add,
    "complete": cmd_complete,
    "delete": cmd_delete,
    "categories": cmd_categories,
    "category-add": cmd_category_add,
    "category-delete": cmd_category_delete,
    "export": cmd_export,
    "import": cmd_import,
}


def build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recurring maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s status
  %(prog)s --data home.yaml list --category Vehicle
  %(prog)s add "Oil change" --category Vehicle --last-date 2024-01-10 \\
      --next-date 2024-07-10 --periodicity 6-months --cost 45
  %(prog)s complete 3f2a
  %(prog)s history --since 2024-01-01
  %(prog)s --today 2024-07-08 notifications
  %(prog)s export --output backup.json
""",
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=settings.data_file,
        help=f"Path to task YAML file (default: {settings.data_file})",
    )
    parser.add_argument(
        "--today",
        type=parse_day,
        help="Reference date for due calculations (default: today)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Dashboard summary, critical tasks and alerts")

    list_parser = subparsers.add_parser("list", help="List pending tasks")
    list_parser.add_argument("--category", type=str, help="Only tasks in this category")
    list_parser.add_argument(
        "--search", type=str, help="Filter by name (case-insensitive substring)"
    )

    notif_parser = subparsers.add_parser("notifications", help="Show alerts")
    notif_parser.add_argument(
        "--danger-only", action="store_true", help="Only due-today and overdue alerts"
    )

    history_parser = subparsers.add_parser("history", help="View completed maintenance")
    history_parser.add_argument("--category", type=str, help="Only this category")
    history_parser.add_argument(
        "--since", type=parse_day, help="Completed on or after date (YYYY-MM-DD)"
    )
    history_parser.add_argument(
        "--until", type=parse_day, help="Completed on or before date (YYYY-MM-DD)"
    )
    history_parser.add_argument("--min-cost", type=float, help="Minimum cost")
    history_parser.add_argument("--max-cost", type=float, help="Maximum cost")

    add_parser = subparsers.add_parser("add", help="Add a new maintenance task")
    add_parser.add_argument("name", type=str, help="Task name (e.g., 'Oil change')")
    add_parser.add_argument("--category", type=str, default="Other", help="Category name")
    add_parser.add_argument(
        "--last-date", type=parse_day, help="Last service date (default: today)"
    )
    add_parser.add_argument("--next-date", type=parse_day, help="Next due date")
    add_parser.add_argument(
        "--periodicity",
        type=parse_periodicity,
        default=Periodicity.NONE,
        help="none, 30-days, 3-months, 6-months, 1-year or custom",
    )
    add_parser.add_argument("--cost", type=float, help="Cost of service")
    add_parser.add_argument("--notes", type=str, help="Description or notes")
    add_parser.add_argument(
        "--no-notify", action="store_true", help="Disable alerts for this task"
    )
    add_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    complete_parser = subparsers.add_parser("complete", help="Mark a task done")
    complete_parser.add_argument("task_id", type=str, help="Task id (or unique prefix)")
    complete_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would happen without saving"
    )

    delete_parser = subparsers.add_parser("delete", help="Delete a task")
    delete_parser.add_argument("task_id", type=str, help="Task id (or unique prefix)")
    delete_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be deleted without saving"
    )

    subparsers.add_parser("categories", help="List categories")

    cat_add_parser = subparsers.add_parser("category-add", help="Add a category")
    cat_add_parser.add_argument("name", type=str, help="Category name")
    cat_add_parser.add_argument("--icon", type=str, default="Tag", help="Icon name")
    cat_add_parser.add_argument("--color", type=str, default="slate", help="Color token")

    cat_del_parser = subparsers.add_parser("category-delete", help="Delete a category")
    cat_del_parser.add_argument("category", type=str, help="Category id or name")

    export_parser = subparsers.add_parser("export", help="Write a JSON backup")
    export_parser.add_argument(
        "--output", type=Path, help="Backup file (default: backup_upkeep_<date>.json)"
    )

    import_parser = subparsers.add_parser("import", help="Restore from a JSON backup")
    import_parser.add_argument("backup_file", type=Path, help="Backup JSON file")
    import_parser.add_argument(
        "--dry-run", action="store_true", help="Validate without restoring"
    )

    return parser


def main(argv=None):
    settings = load_settings()
    args = build_parser(settings).parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else settings.log_level)

    return COMMANDS[args.command](args, settings)


if __name__ == "__main__":
    sys.exit(main() or 0)
