#!/usr/bin/env python3
"""Tests for tracker CLI formatting helpers and commands."""

import json
from datetime import date

import pytest

from upkeep import Periodicity, TaskStatus, Urgency
from upkeep.calculations import NEVER_DUE
from upkeep.loader import load_categories, load_tasks, save_tasks
from tracker import (
    format_cost,
    format_days,
    format_urgency,
    main,
    make_history_table,
    make_task_table,
    resolve_task_id,
    truncate,
)


class TestFormatCost:
    def test_formats_number(self):
        """Dollar sign, thousands separator, two decimals."""
        assert format_cost(75.50) == "$75.50"
        assert format_cost(1234) == "$1,234.00"

    def test_none_returns_dash(self):
        """Dash when no cost is recorded."""
        assert format_cost(None) == "-"


class TestFormatDays:
    def test_values(self):
        """Today, days ahead and days overdue."""
        assert format_days(0) == "today"
        assert format_days(5) == "5d"
        assert format_days(-3) == "-3d"

    def test_sentinel_returns_dash(self):
        """Dash when there is no due date."""
        assert format_days(NEVER_DUE) == "-"


class TestFormatUrgency:
    def test_readable(self):
        """Urgency names read as words."""
        assert format_urgency(Urgency.DUE_SOON) == "due soon"


class TestTruncate:
    def test_none_and_empty_return_dash(self):
        """Dash for missing text."""
        assert truncate(None) == "-"
        assert truncate("") == "-"

    def test_long_text_truncated_with_ellipsis(self):
        """Long text is cut with an ellipsis."""
        assert truncate("this is a very long note", max_len=15) == "this is a ve..."


class TestTables:
    def test_task_row(self, make_task):
        """Task rows show short id, due date and urgency."""
        task = make_task(
            "abcdef123456",
            next_date="2024-06-20",
            periodicity=Periodicity.EVERY_6_MONTHS,
            cost=45.0,
        )
        [row] = make_task_table([task], date(2024, 6, 15))
        assert row == [
            "abcdef12",
            "Oil change",
            "Vehicle",
            "2024-01-01",
            "2024-06-20",
            "5d",
            "6 months",
            "$45.00",
            "due soon",
        ]

    def test_history_row_uses_completion_date(self, make_task):
        """History rows show when the work was done."""
        task = make_task(
            "a", status=TaskStatus.COMPLETED, completed_at="2024-03-05T14:00:00Z", cost=10.0
        )
        [row] = make_history_table([task])
        assert row[0] == "2024-03-05"
        assert row[4] == "$10.00"


class TestResolveTaskId:
    def test_exact_and_prefix(self, make_task):
        """Exact ids and unique prefixes resolve."""
        tasks = [make_task("abc1"), make_task("abd2")]
        assert resolve_task_id(tasks, "abc1") == "abc1"
        assert resolve_task_id(tasks, "abd") == "abd2"

    def test_ambiguous_or_missing(self, make_task):
        """None for ambiguous or unknown prefixes."""
        tasks = [make_task("abc1"), make_task("abd2")]
        assert resolve_task_id(tasks, "ab") is None
        assert resolve_task_id(tasks, "zz") is None


# =============================================================================
# Commands
# =============================================================================


@pytest.fixture
def data_file(tmp_path, make_task):
    path = tmp_path / "upkeep.yaml"
    save_tasks(
        path,
        [
            make_task(
                "oil1",
                next_date="2024-06-10",
                periodicity=Periodicity.EVERY_6_MONTHS,
                cost=45.0,
            ),
            make_task("gutter", name="Clean gutters", category="Home", next_date="2024-06-17"),
            make_task("panel", name="Panel check", category="Electrical Panel", next_date="2024-12-01"),
        ],
    )
    return path


def run(data_file, *args):
    return main(["--data", str(data_file), "--today", "2024-06-15", *args])


class TestCommands:
    """End-to-end runs of the CLI against a temp task file."""

    def test_status(self, data_file, capsys):
        """Dashboard prints counts and critical tasks."""
        assert run(data_file, "status") == 0
        out = capsys.readouterr().out
        assert "Active tasks: 3" in out
        assert "Overdue: 1" in out
        assert "CRITICAL:" in out
        assert "overdue by 5 days" in out
        assert "Panel check" not in out

    def test_list_filters(self, data_file, capsys):
        """List filters by category."""
        assert run(data_file, "list", "--category", "Home") == 0
        out = capsys.readouterr().out
        assert "Clean gutters" in out
        assert "Oil change" not in out

    def test_notifications_danger_only(self, data_file, capsys):
        """--danger-only hides warnings."""
        assert run(data_file, "notifications", "--danger-only") == 0
        out = capsys.readouterr().out
        assert "DANGER" in out
        assert "WARNING" not in out

    def test_complete_spawns_next(self, data_file, capsys):
        """Completing a recurring task reports the next due date."""
        assert run(data_file, "complete", "oil") == 0
        assert "Next occurrence due: 2024-12-10" in capsys.readouterr().out

        tasks = load_tasks(data_file)
        assert len(tasks) == 4
        assert tasks[0].status == TaskStatus.COMPLETED
        assert tasks[0].completed_at.endswith("Z")
        assert tasks[3].next_date == "2024-12-10"
        assert tasks[3].last_date == "2024-06-10"

    def test_complete_dry_run(self, data_file, capsys):
        """--dry-run does not save."""
        assert run(data_file, "complete", "oil1", "--dry-run") == 0
        assert len(load_tasks(data_file)) == 3

    def test_complete_unknown(self, data_file, capsys):
        """Unknown id exits 1."""
        assert run(data_file, "complete", "nope") == 1
        assert "Error" in capsys.readouterr().out

    def test_add(self, data_file, capsys):
        """Add saves a new pending task."""
        assert run(
            data_file, "add", "Smoke alarms", "--category", "Home",
            "--next-date", "2024-07-01", "--periodicity", "1-year", "--cost", "20",
        ) == 0
        added = load_tasks(data_file)[-1]
        assert added.name == "Smoke alarms"
        assert added.last_date == "2024-06-15"
        assert added.periodicity == Periodicity.EVERY_1_YEAR
        assert added.cost == 20.0

    def test_add_rejects_bad_periodicity(self, data_file):
        """Unknown periodicity is an argparse error."""
        with pytest.raises(SystemExit):
            run(data_file, "add", "X", "--periodicity", "weekly")

    def test_delete(self, data_file, capsys):
        """Delete removes the record."""
        assert run(data_file, "delete", "panel") == 0
        assert [t.id for t in load_tasks(data_file)] == ["oil1", "gutter"]

    def test_history(self, data_file, capsys):
        """Completed tasks show in history."""
        run(data_file, "complete", "gutter")
        capsys.readouterr()
        assert run(data_file, "history") == 0
        out = capsys.readouterr().out
        assert "Completed services: 1" in out
        assert "Clean gutters" in out

    def test_category_delete_in_use(self, data_file, capsys):
        """Categories with tasks are kept."""
        assert run(data_file, "category-delete", "Home") == 1
        assert "used by existing" in capsys.readouterr().out

    def test_category_add_and_delete(self, data_file, capsys):
        """Categories can be added and removed."""
        assert run(data_file, "category-add", "Boat", "--icon", "Anchor") == 0
        assert "Boat" in [c.name for c in load_categories(data_file)]
        assert run(data_file, "category-delete", "boat") == 0
        assert "Boat" not in [c.name for c in load_categories(data_file)]

    def test_export_and_import(self, data_file, tmp_path, capsys):
        """A backup restores into a new file."""
        backup = tmp_path / "backup.json"
        assert run(data_file, "export", "--output", str(backup)) == 0
        assert len(json.loads(backup.read_text())["records"]) == 3

        restored = tmp_path / "restored.yaml"
        assert run(restored, "import", str(backup)) == 0
        assert [t.id for t in load_tasks(restored)] == ["oil1", "gutter", "panel"]

    def test_import_invalid(self, data_file, tmp_path, capsys):
        """Invalid backups exit 1."""
        backup = tmp_path / "backup.json"
        backup.write_text("[]")
        assert run(data_file, "import", str(backup)) == 1
        assert "Error" in capsys.readouterr().out
