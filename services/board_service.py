"""Board data shaping: columns, search, subtask progress, card view models."""
from __future__ import annotations
import itertools
import logging
from typing import Any, Dict, List, Optional, Tuple

from core.exceptions import FirebaseError, ValidationError
from core.models import AWAIT_FEEDBACK, CATEGORIES, DONE, IN_PROGRESS, TODO, USER_STORY, Assignee, Contact, Subtask, Task
from core.validation import validate_subtask_name, validate_task_fields
from services.contacts_service import initials
from storage.firebase import FirebaseClient

logger = logging.getLogger(__name__)

MAX_AVATARS = 3

_EMPTY_TEXT = {
    TODO: "to do",
    IN_PROGRESS: "in progress",
    AWAIT_FEEDBACK: "await feedback",
    DONE: "done",
}

_subtask_counter = itertools.count()


def parse_tasks(raw: Dict[str, Dict[str, Any]]) -> List[Task]:
    return [Task.from_record(tid, data) for tid, data in (raw or {}).items() if isinstance(data, dict)]


def group_by_category(tasks: List[Task]) -> Dict[str, List[Task]]:
    columns: Dict[str, List[Task]] = {c: [] for c in CATEGORIES}
    for t in tasks:
        columns[t.category if t.category in columns else TODO].append(t)
    return columns


def empty_column_text(category: str) -> str:
    return f"No tasks {_EMPTY_TEXT.get(category, 'done')}."


def search_tasks(tasks: List[Task], term: str) -> List[Task]:
    term = (term or "").strip().lower()
    if not term:
        return list(tasks)
    return [t for t in tasks if term in t.title.lower() or term in t.description.lower()]


# ---------- subtasks ----------
def calculate_subtask_progress(subtasks: Dict[str, Subtask]) -> Tuple[int, int]:
    items = list((subtasks or {}).values())
    return sum(1 for s in items if s.completed), len(items)


def progress_label(subtasks: Dict[str, Subtask]) -> str:
    completed, total = calculate_subtask_progress(subtasks)
    return f"{completed}/{total}"


def progress_ratio(subtasks: Dict[str, Subtask]) -> float:
    completed, total = calculate_subtask_progress(subtasks)
    return completed / total if total else 0.0


def toggle_subtask(task: Task, subtask_id: str) -> Subtask:
    subtask = task.subtasks.get(subtask_id)
    if subtask is None:
        raise KeyError(subtask_id)
    subtask.completed = not subtask.completed
    return subtask


def new_subtask_id(existing: Dict[str, Subtask]) -> str:
    while True:
        sid = f"subtask-{next(_subtask_counter)}"
        if sid not in existing:
            return sid


def add_subtask(subtasks: Dict[str, Subtask], name: str) -> str:
    name = validate_subtask_name(name)
    sid = new_subtask_id(subtasks)
    subtasks[sid] = Subtask(name=name)
    return sid


def rename_subtask(subtasks: Dict[str, Subtask], subtask_id: str, name: str) -> None:
    if subtask_id not in subtasks:
        return
    subtasks[subtask_id].name = validate_subtask_name(name, "Please enter a valid subtask.")


def delete_subtask(subtasks: Dict[str, Subtask], subtask_id: str) -> None:
    subtasks.pop(subtask_id, None)


# ---------- assignees ----------
def build_assigned_to(selected: List[Contact]) -> Dict[str, Assignee]:
    """contact1..N snapshots, in selection order."""
    return {f"contact{i}": Assignee(name=c.name, color=c.color) for i, c in enumerate(selected, start=1)}


def toggle_assignee(assignees: List[Assignee], contact: Contact) -> List[Assignee]:
    """Drop the snapshot carrying the contact's name, or append a fresh one.

    Entries the user does not touch keep their stored name and color, even
    when the contact has since been renamed, recolored or deleted.
    """
    if any(a.name == contact.name for a in assignees):
        return [a for a in assignees if a.name != contact.name]
    return assignees + [Assignee(name=contact.name, color=contact.color)]


def renumber_assigned(assignees: List[Assignee]) -> Dict[str, Assignee]:
    return {f"contact{i}": a for i, a in enumerate(assignees, start=1)}


def badge_color(badge: str) -> str:
    return "#0038FF" if badge == USER_STORY else "#FF7A00"


def card_view(task: Task) -> Dict[str, Any]:
    """Everything a board card needs to draw itself."""
    completed, total = calculate_subtask_progress(task.subtasks)
    named = [a for a in task.assigned_to.values() if a.name and a.name.strip()]
    shown = named[:MAX_AVATARS]
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "badge": task.badge,
        "badge_color": badge_color(task.badge),
        "progress": f"{completed}/{total} Subtasks" if total else "",
        "progress_ratio": completed / total if total else 0.0,
        "avatars": [(initials(a.name), a.color or "#A8A8A8") for a in shown],
        "extra_count": len(named) - len(shown),
        "priority": task.priority,
        "movable": task.category != DONE,
    }


class BoardService:
    def __init__(self, client: FirebaseClient):
        self.client = client

    def load_tasks(self) -> List[Task]:
        try:
            return parse_tasks(self.client.fetch_tasks())
        except FirebaseError:
            logger.exception("Error loading tasks")
            return []

    def create_task(self, task: Task, today=None) -> Task:
        validate_task_fields(task.title, task.badge, task.due_date, today)
        task.id = self.client.create_task(task.to_record())
        logger.info("Task created: %s (%s)", task.title, task.id)
        return task

    def save_task(self, task: Task) -> Task:
        if not task.id:
            raise ValidationError("Task has no id. Cannot update task.")
        if not task.title.strip():
            raise ValidationError("Please enter a title.")
        self.client.update_task(task.id, task.to_record())
        return task

    def move_task(self, task: Task, category: str) -> Task:
        if category not in CATEGORIES:
            raise ValidationError(f"Unknown category: {category}")
        if task.category == category:
            return task
        task.category = category
        self.client.patch_task(task.id, category=category)
        logger.info("Task %s moved to %s", task.id, category)
        return task

    def toggle_subtask(self, task: Task, subtask_id: str) -> Subtask:
        subtask = toggle_subtask(task, subtask_id)
        self.client.patch_subtask(task.id, subtask_id, completed=subtask.completed)
        return subtask

    def delete_task(self, task_id: Optional[str]) -> None:
        if not task_id:
            raise ValidationError("Task has no id. Cannot delete task.")
        self.client.delete_task(task_id)
        logger.info("Task deleted: %s", task_id)
