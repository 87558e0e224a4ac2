from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Board columns, in display order
TODO = "To-Do"
IN_PROGRESS = "In Progress"
AWAIT_FEEDBACK = "Await Feedback"
DONE = "Done"
CATEGORIES = (TODO, IN_PROGRESS, AWAIT_FEEDBACK, DONE)

# Task type badges
TECHNICAL_TASK = "Technical Task"
USER_STORY = "User Story"
BADGES = (TECHNICAL_TASK, USER_STORY)

PRIORITIES = ("urgent", "medium", "low")

GUEST = "guest"


@dataclass
class Contact:
    id: str
    name: str
    email: str = ""
    phone: str = ""
    color: Optional[str] = None
    password: Optional[str] = None  # only set for signed-up users

    @classmethod
    def from_record(cls, contact_id: str, data: Dict[str, Any]) -> "Contact":
        return cls(
            id=contact_id,
            name=data.get("name") or "",
            email=data.get("email") or "",
            phone=data.get("phone") or "",
            color=data.get("color"),
            password=data.get("password"),
        )

    def to_record(self) -> Dict[str, Any]:
        rec: Dict[str, Any] = {"name": self.name, "email": self.email, "phone": self.phone}
        if self.color:
            rec["color"] = self.color
        if self.password is not None:
            rec["password"] = self.password
        return rec


@dataclass
class Subtask:
    name: str
    completed: bool = False

    def to_record(self) -> Dict[str, Any]:
        return {"name": self.name, "completed": self.completed}


@dataclass
class Assignee:
    """Snapshot of a contact at assignment time, not a live reference."""
    name: str
    color: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return {"name": self.name, "color": self.color}


@dataclass
class Task:
    id: Optional[str]
    title: str
    description: str = ""
    due_date: str = ""  # YYYY-MM-DD
    priority: str = ""  # urgent | medium | low | ""
    badge: str = ""     # Technical Task | User Story
    category: str = TODO
    assigned_to: Dict[str, Assignee] = field(default_factory=dict)  # contactN -> snapshot
    subtasks: Dict[str, Subtask] = field(default_factory=dict)      # id -> subtask

    @classmethod
    def from_record(cls, task_id: Optional[str], data: Dict[str, Any]) -> "Task":
        return cls(
            id=task_id,
            title=data.get("title") or "",
            description=data.get("description") or "",
            due_date=data.get("dueDate") or "",
            priority=data.get("priority") or "",
            badge=data.get("badge") or "",
            category=data.get("category") or TODO,
            assigned_to=_parse_assigned(data.get("assignedTo")),
            subtasks=parse_subtasks(data.get("subtasks")),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date,
            "priority": self.priority,
            "badge": self.badge,
            "category": self.category,
            "assignedTo": {k: a.to_record() for k, a in self.assigned_to.items()} or "",
            "subtasks": {k: s.to_record() for k, s in self.subtasks.items()},
        }


@dataclass
class CurrentUser:
    name: str = ""

    @property
    def is_guest(self) -> bool:
        return self.name == GUEST


def parse_subtasks(raw: Any) -> Dict[str, Subtask]:
    """Subtasks arrive as a list or as an id-keyed map; both become a map."""
    if not raw:
        return {}
    if isinstance(raw, list):
        items = [(str(i), s) for i, s in enumerate(raw)]
    elif isinstance(raw, dict):
        items = list(raw.items())
    else:
        return {}
    out: Dict[str, Subtask] = {}
    for key, s in items:
        if not isinstance(s, dict):
            continue  # firebase leaves null holes in sparse arrays
        out[str(key)] = Subtask(name=s.get("name") or "", completed=bool(s.get("completed")))
    return out


def _parse_assigned(raw: Any) -> Dict[str, Assignee]:
    if not isinstance(raw, dict):
        return {}
    return {
        key: Assignee(name=a.get("name") or "", color=a.get("color"))
        for key, a in raw.items()
        if isinstance(a, dict)
    }


def contacts_by_id(contacts: List[Contact]) -> Dict[str, Contact]:
    return {c.id: c for c in contacts}
