"""Shared fixtures for upkeep tests."""

import pytest

from upkeep import MaintenanceTask, Periodicity, TaskStatus


@pytest.fixture
def make_task():
    """Factory for tasks with sensible defaults; override any field."""

    def _make(id="t1", **overrides):
        fields = dict(
            id=id,
            name="Oil change",
            category="Vehicle",
            last_date="2024-01-01",
            created_at="2024-01-01T08:00:00Z",
            next_date=None,
            periodicity=Periodicity.NONE,
            cost=None,
            notifications_enabled=True,
            status=TaskStatus.PENDING,
            completed_at=None,
            description="",
        )
        fields.update(overrides)
        return MaintenanceTask(**fields)

    return _make


@pytest.fixture
def fixed_ids():
    """Deterministic id provider: new-1, new-2, ..."""
    counter = iter(range(1, 1000))
    return lambda: f"new-{next(counter)}"
