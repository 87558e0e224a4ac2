from __future__ import annotations
import copy
import datetime as dt
import logging
from typing import Dict, List, Optional

from core.exceptions import ValidationError
from core.models import CATEGORIES, TODO, Assignee, Contact, CurrentUser, Subtask, Task, contacts_by_id
from services import board_service as board
from services.auth_service import AuthService, is_authenticated, user_initials
from services.board_service import BoardService
from services.contacts_service import ContactsService, filter_contacts, group_by_first_letter
from services.summary_service import summary
from storage.firebase import FirebaseClient

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = "medium"


class AppController:
    """Coordinates the UI with the remote store; holds what the windows currently display."""
    def __init__(self, client: FirebaseClient):
        self.client = client
        self.auth = AuthService(client)
        self.contacts_service = ContactsService(client)
        self.board = BoardService(client)

        self.current_user = CurrentUser()
        self.contacts: List[Contact] = []
        self.tasks: List[Task] = []
        self.active_contact: Optional[Contact] = None
        self.current_task_id: Optional[str] = None
        # add-task form draft
        self.selected_contacts: List[Contact] = []
        self.task_priority = DEFAULT_PRIORITY
        self.draft_subtasks: Dict[str, Subtask] = {}

    # ---- session ----
    def login(self, email: str, password: str) -> bool:
        contact = self.auth.login(email, password)
        if contact is None:
            return False
        self.current_user = CurrentUser(contact.name)
        return True

    def guest_login(self):
        self.current_user = self.auth.guest_login()

    def signup(self, name: str, email: str, password: str, confirm: str, accept_policy: bool) -> str:
        return self.auth.signup(name, email, password, confirm, accept_policy)

    def logout(self):
        self.auth.logout()
        self.current_user = CurrentUser()

    def refresh_current_user(self) -> bool:
        """Re-read currentUser from the store; False when nobody is logged in."""
        self.current_user = self.auth.current_user()
        return is_authenticated(self.current_user)

    def header_initials(self) -> str:
        return user_initials(self.current_user.name)

    # ---- contacts ----
    def load_contacts(self) -> List[Contact]:
        self.contacts = self.contacts_service.load_contacts()
        if self.active_contact:
            self.active_contact = contacts_by_id(self.contacts).get(self.active_contact.id)
        return self.contacts

    def contact_groups(self):
        return group_by_first_letter(self.contacts)

    def select_contact(self, contact_id: str) -> Optional[Contact]:
        self.active_contact = contacts_by_id(self.contacts).get(contact_id)
        return self.active_contact

    def clear_active_contact(self):
        self.active_contact = None

    def add_contact(self, name: str, email: str, phone: str) -> Contact:
        contact = self.contacts_service.create_contact(name, email, phone)
        self.load_contacts()
        return self.select_contact(contact.id) or contact

    def save_contact(self, contact_id: str, name: str, email: str, phone: str) -> Contact:
        contact = self.contacts_service.update_contact(contact_id, name, email, phone)
        self.load_contacts()
        return self.select_contact(contact.id) or contact

    def delete_contact(self, contact_id: str):
        self.contacts_service.delete_contact(contact_id)
        if self.active_contact and self.active_contact.id == contact_id:
            self.active_contact = None
        self.selected_contacts = [c for c in self.selected_contacts if c.id != contact_id]
        self.load_contacts()

    # ---- add-task form ----
    def search_assignees(self, term: str) -> List[Contact]:
        return filter_contacts(self.contacts, term)

    def is_selected(self, contact_id: str) -> bool:
        return any(c.id == contact_id for c in self.selected_contacts)

    def toggle_assignee(self, contact_id: str) -> bool:
        """Returns True when the contact ends up selected."""
        if self.is_selected(contact_id):
            self.selected_contacts = [c for c in self.selected_contacts if c.id != contact_id]
            return False
        contact = contacts_by_id(self.contacts).get(contact_id)
        if contact is None:
            return False
        self.selected_contacts.append(contact)
        return True

    def set_priority(self, priority: str) -> str:
        # clicking the active button clears it
        self.task_priority = "" if self.task_priority == priority else priority
        return self.task_priority

    def add_draft_subtask(self, name: str) -> str:
        return board.add_subtask(self.draft_subtasks, name)

    def rename_draft_subtask(self, subtask_id: str, name: str):
        board.rename_subtask(self.draft_subtasks, subtask_id, name)

    def delete_draft_subtask(self, subtask_id: str):
        board.delete_subtask(self.draft_subtasks, subtask_id)

    def reset_task_form(self):
        self.selected_contacts = []
        self.task_priority = DEFAULT_PRIORITY
        self.draft_subtasks = {}

    def create_task(self, title: str, description: str, due_date: str, badge: str,
                    category: str = TODO, today: Optional[dt.date] = None,
                    priority: Optional[str] = None,
                    assignees: Optional[List[Assignee]] = None,
                    subtasks: Optional[Dict[str, Subtask]] = None) -> Task:
        """POST a new task.

        Without ``priority``/``assignees``/``subtasks`` the shared add-task draft
        is used and reset afterwards. A form keeping its own draft passes all
        three and the shared draft is left alone.
        """
        own_draft = priority is not None or assignees is not None or subtasks is not None
        if category not in CATEGORIES:
            category = TODO
        task = Task(
            id=None,
            title=title.strip(),
            description=description.strip(),
            due_date=due_date.strip(),
            priority=self.task_priority if priority is None else priority,
            badge=badge,
            category=category,
            assigned_to=(board.build_assigned_to(self.selected_contacts) if assignees is None
                         else board.renumber_assigned(assignees)),
            subtasks=dict(self.draft_subtasks if subtasks is None else subtasks),
        )
        self.board.create_task(task, today)
        if not own_draft:
            self.reset_task_form()
        self.tasks.append(task)
        return task

    # ---- board ----
    def load_tasks(self) -> List[Task]:
        self.tasks = self.board.load_tasks()
        return self.tasks

    def get_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def _require_task(self, task_id: str) -> Task:
        task = self.get_task(task_id)
        if task is None:
            raise ValidationError(f"Task {task_id} is no longer on the board.")
        return task

    def board_columns(self, term: str = "") -> Dict[str, List[Task]]:
        return board.group_by_category(board.search_tasks(self.tasks, term))

    def open_task(self, task_id: str) -> Optional[Task]:
        self.current_task_id = task_id
        return self.get_task(task_id)

    def close_task(self):
        self.current_task_id = None

    def move_task(self, task_id: str, category: str) -> Task:
        return self.board.move_task(self._require_task(task_id), category)

    def toggle_subtask(self, task_id: str, subtask_id: str) -> Subtask:
        return self.board.toggle_subtask(self._require_task(task_id), subtask_id)

    def update_task(self, task_id: str, **fields) -> Task:
        """Apply edits from the board edit form and PUT the whole task.

        The edits go onto a copy; the board only sees them once the write went through.
        """
        current = self._require_task(task_id)
        edited = copy.deepcopy(current)
        for name, value in fields.items():
            if not hasattr(edited, name) or name == "id":
                raise AttributeError(name)
            setattr(edited, name, copy.deepcopy(value))
        self.board.save_task(edited)
        self.tasks = [edited if t is current else t for t in self.tasks]
        return edited

    def delete_task(self, task_id: str):
        self.board.delete_task(task_id)
        self.tasks = [t for t in self.tasks if t.id != task_id]
        if self.current_task_id == task_id:
            self.current_task_id = None

    # ---- summary ----
    def summary(self, now: Optional[dt.datetime] = None):
        return summary(self.tasks, self.current_user.name, now)
