"""CategoryDefinition class and the category registry helpers."""

import uuid
from typing import Iterable, List, Optional


class CategoryInUseError(ValueError):
    """Raised when deleting a category that tasks still reference."""


class CategoryDefinition:
    """A display category that tasks reference by name."""

    def __init__(self, id: str, name: str, icon: str = "Tag", color: str = "slate"):
        self.id = id
        self.name = name
        self.icon = icon
        self.color = color

    @property
    def key(self) -> str:
        """Normalized name used for matching task references."""
        return normalize_name(self.name)

    def __eq__(self, other):
        if not isinstance(other, CategoryDefinition):
            return NotImplemented
        return (self.id, self.name, self.icon, self.color) == (
            other.id,
            other.name,
            other.icon,
            other.color,
        )

    def __repr__(self):
        return f"CategoryDefinition({self.id!r}, {self.name!r})"


def default_categories() -> List[CategoryDefinition]:
    """Categories offered before the user defines any."""
    return [
        CategoryDefinition("1", "Vehicle", "Car", "blue"),
        CategoryDefinition("2", "Generator", "Zap", "amber"),
        CategoryDefinition("3", "Home", "Home", "emerald"),
        CategoryDefinition("4", "Electrical Panel", "Layout", "purple"),
        CategoryDefinition("5", "Other", "Settings", "slate"),
    ]


def new_category_id() -> str:
    return uuid.uuid4().hex[:12]


def normalize_name(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def find_category(
    categories: Iterable[CategoryDefinition], name: str
) -> Optional[CategoryDefinition]:
    """Find a category by name (case-insensitive)."""
    key = normalize_name(name)
    for category in categories:
        if category.key == key:
            return category
    return None


def category_in_use(name: str, tasks) -> bool:
    """Check whether any task references the category name."""
    key = normalize_name(name)
    return any(normalize_name(t.category) == key for t in tasks)


def save_category(
    categories: List[CategoryDefinition], category: CategoryDefinition
) -> List[CategoryDefinition]:
    """Insert or replace a category by id. Returns a new list."""
    if any(c.id == category.id for c in categories):
        return [category if c.id == category.id else c for c in categories]
    return [*categories, category]


def delete_category(
    categories: List[CategoryDefinition], category_id: str, tasks
) -> List[CategoryDefinition]:
    """
    Remove a category by id. Returns a new list.

    Raises CategoryInUseError if a task still references the category,
    KeyError if the id is unknown.
    """
    target = next((c for c in categories if c.id == category_id), None)
    if target is None:
        raise KeyError(f"Unknown category id '{category_id}'")
    if category_in_use(target.name, tasks):
        raise CategoryInUseError(
            f"Category '{target.name}' is used by existing maintenance tasks"
        )
    return [c for c in categories if c.id != category_id]
