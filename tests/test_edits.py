#!/usr/bin/env python3
"""Tests for record editing."""

from datetime import datetime, timezone

import pytest

from upkeep import Periodicity, TaskStatus
from upkeep.edits import add_task, delete_task, new_task, replace_task

NOW = datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)


class TestNewTask:
    def test_defaults(self, fixed_ids):
        """New tasks are pending with a fresh id and timestamp."""
        task = new_task("Smoke alarms", "Home", "2024-03-01", NOW, new_id=fixed_ids)
        assert task.id == "new-1"
        assert task.created_at == "2024-03-01T08:30:00Z"
        assert task.status == TaskStatus.PENDING
        assert task.notifications_enabled is True
        assert task.periodicity == Periodicity.NONE
        assert task.completed_at is None


class TestAddTask:
    """Tests for add_task."""

    def test_appends(self, make_task):
        """New record goes at the end of a new list."""
        tasks = [make_task("a")]
        result = add_task(tasks, make_task("b"), NOW)
        assert [t.id for t in result] == ["a", "b"]
        assert len(tasks) == 1

    def test_duplicate_id_rejected(self, make_task):
        """Ids must be unique."""
        with pytest.raises(ValueError, match="Duplicate"):
            add_task([make_task("a")], make_task("a"), NOW)

    def test_negative_cost_rejected(self, make_task):
        """Cost must be zero or more."""
        with pytest.raises(ValueError, match="negative"):
            add_task([], make_task("a", cost=-1.0), NOW)

    def test_entered_as_completed_runs_completion(self, make_task, fixed_ids):
        """A task added as done spawns its successor."""
        task = make_task(
            "a",
            next_date="2024-03-01",
            periodicity=Periodicity.EVERY_3_MONTHS,
            status=TaskStatus.COMPLETED,
        )
        result = add_task([], task, NOW, new_id=fixed_ids)
        assert result[0].status == TaskStatus.COMPLETED
        assert result[0].completed_at == "2024-03-01T08:30:00Z"
        assert result[1].next_date == "2024-06-01"
        assert result[1].status == TaskStatus.PENDING


class TestReplaceTask:
    """Tests for replace_task."""

    def test_whole_record_replace(self, make_task):
        """Every field comes from the edited record."""
        tasks = [make_task("a", name="Old"), make_task("b")]
        result = replace_task(tasks, make_task("a", name="New", cost=10.0), NOW)
        assert result[0].name == "New"
        assert result[0].cost == 10.0
        assert result[1] is tasks[1]

    def test_unknown_id(self, make_task):
        """KeyError for an unknown id."""
        with pytest.raises(KeyError):
            replace_task([make_task("a")], make_task("zzz"), NOW)

    def test_pending_to_completed_spawns_successor(self, make_task, fixed_ids):
        """Marking done through an edit spawns the successor."""
        tasks = [make_task("a", next_date="2024-02-01", periodicity=Periodicity.EVERY_30_DAYS)]
        edited = make_task(
            "a",
            next_date="2024-02-01",
            periodicity=Periodicity.EVERY_30_DAYS,
            status=TaskStatus.COMPLETED,
            cost=50.0,
        )
        result = replace_task(tasks, edited, NOW, new_id=fixed_ids)
        assert len(result) == 2
        assert result[0].status == TaskStatus.COMPLETED
        assert result[0].cost == 50.0
        assert result[0].completed_at == "2024-03-01T08:30:00Z"
        assert result[1].next_date == "2024-03-02"

    def test_reopen_clears_completed_at(self, make_task):
        """Reopening drops the completion time."""
        tasks = [make_task("a", status=TaskStatus.COMPLETED, completed_at="2024-01-01T00:00:00Z")]
        result = replace_task(tasks, make_task("a", completed_at="2024-01-01T00:00:00Z"), NOW)
        assert result[0].status == TaskStatus.PENDING
        assert result[0].completed_at is None

    def test_editing_completed_keeps_completed_at(self, make_task):
        """Editing a done record keeps its completion time."""
        tasks = [make_task("a", status=TaskStatus.COMPLETED, completed_at="2024-01-01T00:00:00Z")]
        edited = make_task("a", status=TaskStatus.COMPLETED, description="receipt filed")
        result = replace_task(tasks, edited, NOW)
        assert len(result) == 1
        assert result[0].completed_at == "2024-01-01T00:00:00Z"
        assert result[0].description == "receipt filed"


class TestDeleteTask:
    def test_removes(self, make_task):
        """The record is removed from a new list."""
        result = delete_task([make_task("a"), make_task("b")], "a")
        assert [t.id for t in result] == ["b"]

    def test_unknown_id(self, make_task):
        """KeyError for an unknown id."""
        with pytest.raises(KeyError):
            delete_task([make_task("a")], "zzz")
