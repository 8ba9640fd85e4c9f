"""Flask JSON API for recurring maintenance tracking."""

from datetime import date, datetime, timezone

from flask import Flask, jsonify, request

from upkeep import (
    YamlTaskRepository,
    classify,
    complete,
    critical_tasks,
    dashboard_stats,
    days_remaining,
    group_by_category,
    is_overdue,
    urgency,
)
from upkeep.calculations import parse_date
from upkeep.category import category_in_use
from upkeep.config import load_settings
from upkeep.edits import delete_task
from upkeep.history import active_tasks, completed_history, recent_costs, total_cost
from upkeep.recurrence import find_task

settings = load_settings()

app = Flask(__name__)
app.secret_key = settings.secret_key
app.config["DATA_FILE"] = settings.data_file
app.config["SOON_DAYS"] = settings.soon_days
app.config["CRITICAL_DAYS"] = settings.critical_days


def get_repository() -> YamlTaskRepository:
    return YamlTaskRepository(app.config["DATA_FILE"])


def get_today() -> date:
    """Reference date: ?today=YYYY-MM-DD, defaults to today."""
    return parse_date(request.args.get("today")) or date.today()


def error(message: str, status: int):
    return jsonify({"error": message}), status


def task_json(task, today: date) -> dict:
    """Serialize a task plus its derived fields."""
    return {
        "id": task.id,
        "name": task.name,
        "category": task.category,
        "lastDate": task.last_date,
        "nextDate": task.next_date,
        "periodicity": task.periodicity.value,
        "description": task.description,
        "cost": task.cost,
        "notificationsEnabled": task.notifications_enabled,
        "status": task.status.value,
        "createdAt": task.created_at,
        "completedAt": task.completed_at,
        "daysRemaining": days_remaining(task.next_date, today),
        "urgency": urgency(task, today, app.config["CRITICAL_DAYS"]).name.lower(),
        "overdue": is_overdue(task, today),
    }


def notification_json(notification) -> dict:
    return {
        "id": notification.id,
        "taskId": notification.task_id,
        "title": notification.title,
        "message": notification.message,
        "tier": notification.tier.value,
        "date": notification.date,
        "days": notification.days,
    }


@app.route("/")
def index():
    """Dashboard: summary counts, critical tasks and alerts."""
    repo = get_repository()
    tasks = repo.load()
    today = get_today()

    stats = dashboard_stats(tasks, today, app.config["CRITICAL_DAYS"])
    notifications = classify(tasks, today, app.config["SOON_DAYS"])
    groups = group_by_category(tasks, repo.load_categories())

    return jsonify({
        "today": today.isoformat(),
        "stats": {
            "total": stats.total,
            "upcoming": stats.upcoming,
            "overdue": stats.overdue,
            "totalCost": stats.total_cost,
        },
        "critical": [
            task_json(t, today)
            for t in critical_tasks(tasks, today, app.config["CRITICAL_DAYS"])
        ],
        "notifications": [notification_json(n) for n in notifications],
        "badge": sum(1 for n in notifications if n.is_danger),
        "byCategory": {name: len(items) for name, items in groups.items()},
        "recentCosts": [{"name": name, "cost": cost} for name, cost in recent_costs(tasks)],
    })


@app.route("/tasks")
def list_tasks():
    """Pending tasks, earliest due first. ?category= and ?search= filter."""
    tasks = get_repository().load()
    today = get_today()
    entries = active_tasks(
        tasks,
        category=request.args.get("category") or None,
        search=request.args.get("search") or None,
    )
    return jsonify([task_json(t, today) for t in entries])


@app.route("/notifications")
def list_notifications():
    tasks = get_repository().load()
    notifications = classify(tasks, get_today(), app.config["SOON_DAYS"])
    return jsonify([notification_json(n) for n in notifications])


@app.route("/tasks/<task_id>/complete", methods=["POST"])
def complete_task(task_id: str):
    """Mark a task done; recurring tasks get their next occurrence."""
    repo = get_repository()
    tasks = repo.load()
    index = find_task(tasks, task_id)
    if index is None:
        return error(f"Task '{task_id}' not found", 404)

    now = datetime.now(timezone.utc).replace(microsecond=0)
    updated = complete(task_id, tasks, now)
    if updated is not tasks:
        repo.save(updated)

    today = get_today()
    return jsonify({
        "task": task_json(updated[index], today),
        "spawned": [task_json(t, today) for t in updated[len(tasks):]],
    })


@app.route("/tasks/<task_id>", methods=["DELETE"])
def remove_task(task_id: str):
    repo = get_repository()
    try:
        tasks = delete_task(repo.load(), task_id)
    except KeyError:
        return error(f"Task '{task_id}' not found", 404)
    repo.save(tasks)
    return jsonify({"deleted": task_id})


@app.route("/history")
def history():
    """Completed tasks. Filters: category, since, until, min_cost, max_cost."""
    tasks = get_repository().load()
    # Unparseable cost filters are ignored
    entries = completed_history(
        tasks,
        category=request.args.get("category") or None,
        done_from=parse_date(request.args.get("since")),
        done_to=parse_date(request.args.get("until")),
        min_cost=request.args.get("min_cost", type=float),
        max_cost=request.args.get("max_cost", type=float),
    )
    today = get_today()
    return jsonify({
        "entries": [task_json(t, today) for t in entries],
        "totalCost": total_cost(entries),
    })


@app.route("/categories")
def categories():
    repo = get_repository()
    tasks = repo.load()
    return jsonify([
        {
            "id": c.id,
            "name": c.name,
            "icon": c.icon,
            "color": c.color,
            "inUse": category_in_use(c.name, tasks),
        }
        for c in repo.load_categories()
    ])


if __name__ == "__main__":
    from upkeep.logging_setup import setup_logging

    setup_logging(settings.log_level)
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
