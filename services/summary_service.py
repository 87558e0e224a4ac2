from __future__ import annotations
import datetime as dt
from typing import Dict, List, Optional

from core.models import AWAIT_FEEDBACK, CATEGORIES, DONE, GUEST, IN_PROGRESS, TODO, Task

NO_DEADLINES = "No Deadlines"


def count_tasks(tasks: List[Task]) -> Dict[str, int]:
    counts = {c: 0 for c in CATEGORIES}
    counts["total"] = len(tasks)
    counts["urgent"] = 0
    for t in tasks:
        if t.category in CATEGORIES:
            counts[t.category] += 1
        if t.priority == "urgent":
            counts["urgent"] += 1
    return counts


def upcoming_deadline(tasks: List[Task], today: Optional[dt.date] = None) -> str:
    """Closest due date on or after today, as 'Month D, YYYY'."""
    today = today or dt.date.today()
    closest = None
    for t in tasks:
        if not t.due_date:
            continue
        try:
            d = dt.date.fromisoformat(t.due_date[:10])
        except ValueError:
            continue
        if d >= today and (closest is None or d < closest):
            closest = d
    if closest is None:
        return NO_DEADLINES
    return f"{closest.strftime('%B')} {closest.day}, {closest.year}"


def greeting(hour: int, user_name: str) -> str:
    if hour < 12:
        text = "Good Morning"
    elif hour < 18:
        text = "Good Afternoon"
    else:
        text = "Good Evening"
    return f"{text}," if user_name != GUEST else text


def format_date_ddmmyyyy(iso_date: str) -> str:
    year, month, day = iso_date.split("-")
    return f"{day}/{month}/{year}"


def summary(tasks: List[Task], user_name: str, now: Optional[dt.datetime] = None) -> Dict[str, object]:
    now = now or dt.datetime.now()
    counts = count_tasks(tasks)
    return {
        "todo": counts[TODO],
        "done": counts[DONE],
        "in_progress": counts[IN_PROGRESS],
        "await_feedback": counts[AWAIT_FEEDBACK],
        "urgent": counts["urgent"],
        "total": counts["total"],
        "deadline": upcoming_deadline(tasks, now.date()),
        "greeting": greeting(now.hour, user_name),
        "user_name": "" if user_name == GUEST else user_name,
    }
