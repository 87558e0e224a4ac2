# tests/test_summary_service.py

from __future__ import annotations

import datetime as dt

import pytest

from core.models import DONE, GUEST, IN_PROGRESS, TODO, Task
from services.board_service import parse_tasks
from services.summary_service import (
    NO_DEADLINES,
    count_tasks,
    format_date_ddmmyyyy,
    greeting,
    summary,
    upcoming_deadline,
)

TODAY = dt.date(2024, 5, 10)


def _t(category: str = TODO, priority: str = "", due: str = "") -> Task:
    return Task(id=None, title="t", category=category, priority=priority, due_date=due)


def test_count_tasks() -> None:
    tasks = [_t(TODO, "urgent"), _t(TODO), _t(DONE, "urgent"), _t(IN_PROGRESS, "low")]
    counts = count_tasks(tasks)
    assert counts[TODO] == 2
    assert counts[DONE] == 1
    assert counts[IN_PROGRESS] == 1
    assert counts["Await Feedback"] == 0
    assert counts["urgent"] == 2
    assert counts["total"] == 4


def test_upcoming_deadline_picks_closest_future_date() -> None:
    tasks = [_t(due="2024-05-01"), _t(due="2024-07-04"), _t(due="2024-05-12"), _t(due=""), _t(due="garbage")]
    assert upcoming_deadline(tasks, TODAY) == "May 12, 2024"


def test_upcoming_deadline_includes_today() -> None:
    assert upcoming_deadline([_t(due="2024-05-10")], TODAY) == "May 10, 2024"


def test_upcoming_deadline_none() -> None:
    assert upcoming_deadline([_t(due="2024-01-01")], TODAY) == NO_DEADLINES
    assert upcoming_deadline([], TODAY) == NO_DEADLINES


@pytest.mark.parametrize("hour,expected", [
    (0, "Good Morning,"), (11, "Good Morning,"), (12, "Good Afternoon,"),
    (17, "Good Afternoon,"), (18, "Good Evening,"), (23, "Good Evening,"),
])
def test_greeting(hour: int, expected: str) -> None:
    assert greeting(hour, "Anton Mayer") == expected


def test_greeting_guest_has_no_comma() -> None:
    assert greeting(9, GUEST) == "Good Morning"


def test_format_date() -> None:
    assert format_date_ddmmyyyy("2024-05-09") == "09/05/2024"


def test_summary_from_seed(seed) -> None:
    tasks = parse_tasks(seed["tasks"])
    result = summary(tasks, "Anton Mayer", dt.datetime(2024, 5, 10, 15, 30))
    assert result == {
        "todo": 1,
        "done": 1,
        "in_progress": 1,
        "await_feedback": 0,
        "urgent": 1,
        "total": 3,
        "deadline": "May 12, 2024",
        "greeting": "Good Afternoon,",
        "user_name": "Anton Mayer",
    }


def test_summary_for_guest_hides_name() -> None:
    result = summary([], GUEST, dt.datetime(2024, 5, 10, 20, 0))
    assert result["user_name"] == ""
    assert result["greeting"] == "Good Evening"
    assert result["deadline"] == NO_DEADLINES
