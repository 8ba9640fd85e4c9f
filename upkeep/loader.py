"""YAML task file storage and JSON backup utilities."""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from jsonschema import ValidationError, validate

from .calculations import format_timestamp
from .category import CategoryDefinition, default_categories
from .periodicity import Periodicity
from .status import TaskStatus
from .task import MaintenanceTask, new_task_id

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.yaml"

PathLike = Union[str, Path]


class BackupError(ValueError):
    """Raised when a backup file can't be read or fails validation."""


def _json_default(value: Any) -> str:
    """Render YAML-native dates the way they are written in the file."""
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not serializable")


def to_plain(data: Any) -> Any:
    """Round-trip through JSON so dates parsed by YAML become ISO strings."""
    return json.loads(json.dumps(data, default=_json_default))


def _parse_object(dct: Dict[str, Any]) -> Union[MaintenanceTask, CategoryDefinition, dict]:
    """Parse dictionary into appropriate object type."""
    # Task record
    if "lastDate" in dct and "name" in dct:
        # A stored "overdue" is stale by definition; overdue is derived
        if dct.get("status") == TaskStatus.COMPLETED.value:
            status = TaskStatus.COMPLETED
            completed_at = dct.get("completedAt") or dct.get("createdAt") or dct["lastDate"]
        else:
            status = TaskStatus.PENDING
            completed_at = None
        return MaintenanceTask(
            id=str(dct.get("id") or new_task_id()),
            name=dct["name"],
            category=dct.get("category") or "",
            last_date=dct["lastDate"],
            created_at=dct.get("createdAt") or "",
            next_date=dct.get("nextDate") or None,
            periodicity=Periodicity.parse(dct.get("periodicity")),
            cost=dct.get("cost"),
            notifications_enabled=dct.get("notificationsEnabled", True),
            status=status,
            completed_at=completed_at,
            description=dct.get("description") or "",
        )
    # Category definition
    elif "name" in dct and "icon" in dct:
        return CategoryDefinition(
            str(dct.get("id") or dct["name"]),
            dct["name"],
            dct["icon"],
            dct.get("color") or "slate",
        )
    else:
        # Top-level document
        return dct


def _task_to_dict(task: MaintenanceTask) -> Dict[str, Any]:
    """Serialize a task to the stored dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": task.id,
        "name": task.name,
        "category": task.category,
        "lastDate": task.last_date,
    }
    if task.next_date is not None:
        d["nextDate"] = task.next_date
    d["periodicity"] = task.periodicity.value
    if task.description:
        d["description"] = task.description
    if task.cost is not None:
        d["cost"] = task.cost
    d["notificationsEnabled"] = task.notifications_enabled
    d["status"] = task.status.value
    d["createdAt"] = task.created_at
    if task.completed_at is not None:
        d["completedAt"] = task.completed_at
    return d


def _category_to_dict(category: CategoryDefinition) -> Dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "icon": category.icon,
        "color": category.color,
    }


def _read_document(filename: PathLike) -> Dict[str, Any]:
    """Load and parse a task file. A missing file reads as empty."""
    path = Path(filename)
    if not path.exists():
        logger.info("Task file %s not found, starting empty", path)
        return {}
    with open(path, "rb") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader) or {}
    return json.loads(json.dumps(data, default=_json_default), object_hook=_parse_object)


def _read_raw(filename: PathLike) -> Dict[str, Any]:
    """Load the raw YAML data (not parsed into objects)."""
    path = Path(filename)
    if not path.exists():
        return {}
    with open(path, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def _write_raw(filename: PathLike, data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def load_tasks(filename: PathLike) -> List[MaintenanceTask]:
    """Load the task collection from a YAML file."""
    tasks = _read_document(filename).get("tasks") or []
    logger.info("Loaded %d tasks from %s", len(tasks), filename)
    return tasks


def load_categories(filename: PathLike) -> List[CategoryDefinition]:
    """Load categories from a YAML file, falling back to the defaults if none are stored."""
    categories = _read_document(filename).get("categories")
    if categories is None:
        return default_categories()
    return categories


def save_tasks(filename: PathLike, tasks: List[MaintenanceTask]) -> None:
    """
    Write the task collection to a YAML file.

    Loads the raw YAML, replaces the tasks list, and writes back, so the
    categories section is left untouched.
    """
    data = _read_raw(filename)
    data["tasks"] = [_task_to_dict(t) for t in tasks]
    _write_raw(filename, data)
    logger.info("Saved %d tasks to %s", len(tasks), filename)


def save_categories(filename: PathLike, categories: List[CategoryDefinition]) -> None:
    """Write the category list to a YAML file, keeping the tasks section."""
    data = _read_raw(filename)
    tasks = data.pop("tasks", None)
    data["categories"] = [_category_to_dict(c) for c in categories]
    # Categories first, tasks after, for readability
    if tasks is not None:
        data["tasks"] = tasks
    _write_raw(filename, data)
    logger.info("Saved %d categories to %s", len(categories), filename)


class YamlTaskRepository:
    """Load/save the task collection and categories in one YAML file."""

    def __init__(self, filename: PathLike):
        self.filename = Path(filename)

    def load(self) -> List[MaintenanceTask]:
        return load_tasks(self.filename)

    def save(self, tasks: List[MaintenanceTask]) -> None:
        save_tasks(self.filename, tasks)

    def load_categories(self) -> List[CategoryDefinition]:
        return load_categories(self.filename)

    def save_categories(self, categories: List[CategoryDefinition]) -> None:
        save_categories(self.filename, categories)


# =============================================================================
# Backups
# =============================================================================


def load_schema() -> Dict[str, Any]:
    """Load the task file JSON schema."""
    with open(SCHEMA_PATH) as f:
        return yaml.safe_load(f)


def backup_schema(schema: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Schema for backup documents, sharing definitions with the task file."""
    schema = schema or load_schema()
    return {
        "type": "object",
        "required": ["records"],
        "properties": {
            "records": {"type": "array", "items": {"$ref": "#/$defs/task"}},
            "categories": {"type": "array", "items": {"$ref": "#/$defs/category"}},
            "exportDate": {"type": "string"},
        },
        "$defs": schema["$defs"],
    }


def backup_filename(today: date) -> str:
    return f"backup_upkeep_{today.isoformat()}.json"


def export_backup(
    tasks: List[MaintenanceTask],
    categories: List[CategoryDefinition],
    now: datetime,
) -> Dict[str, Any]:
    """Build a backup document of all records and categories."""
    return {
        "records": [_task_to_dict(t) for t in tasks],
        "categories": [_category_to_dict(c) for c in categories],
        "exportDate": format_timestamp(now),
    }


def write_backup(
    filename: PathLike,
    tasks: List[MaintenanceTask],
    categories: List[CategoryDefinition],
    now: datetime,
) -> None:
    """Write a JSON backup file."""
    with open(filename, "w") as fp:
        json.dump(export_backup(tasks, categories, now), fp, indent=2, ensure_ascii=False)
    logger.info("Wrote backup of %d tasks to %s", len(tasks), filename)


def read_backup(
    filename: PathLike,
) -> Tuple[List[MaintenanceTask], List[CategoryDefinition]]:
    """
    Read and validate a JSON backup file.

    Returns (tasks, categories); categories fall back to the defaults when
    the backup has no categories key. Raises BackupError on unreadable or invalid data.
    """
    try:
        with open(filename) as fp:
            data = json.load(fp)
    except (OSError, json.JSONDecodeError) as e:
        raise BackupError(f"Could not read backup {filename}: {e}") from e

    try:
        validate(instance=data, schema=backup_schema())
    except ValidationError as e:
        raise BackupError(f"Invalid backup file: {e.message}") from e

    document = json.loads(json.dumps(data), object_hook=_parse_object)
    categories = document.get("categories")
    if categories is None:
        categories = default_categories()
    logger.info("Read backup of %d tasks from %s", len(document["records"]), filename)
    return document["records"], categories
