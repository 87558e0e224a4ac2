"""
Add-task / edit-task form
-------------------------
Title, description, due date (YYYY-MM-DD), priority toggle buttons, the
assignee picker with a name filter, the task type badge and the subtask
editor. The same frame backs the "Add Task" tab and the board's edit dialog:

- ``mode="add"``: draft state (assignees, priority, subtasks) lives in the
  controller and ``Create Task`` POSTs it. With ``own_draft=True`` (the
  board's column "+" dialog) the form keeps a private draft instead, so the
  Add Task tab's draft is left alone.
- ``mode="edit"``: the form edits a copy of an existing task and hands the
  new field values to ``on_submit``. Assignees stay the stored snapshots;
  only the ones the user toggles change.
"""
from __future__ import annotations
import copy
import logging
import tkinter as tk
from tkinter import ttk, messagebox as mb, simpledialog
from typing import Callable, Dict, List, Optional, Tuple

from controller.app_controller import DEFAULT_PRIORITY, AppController
from core.exceptions import FirebaseError, ValidationError
from core.models import BADGES, PRIORITIES, TODO, Assignee, Contact, Subtask, Task, contacts_by_id
from core.validation import DUE_DATE_MSG, is_due_date_allowed
from gui.task_list import SubtaskList, initials_badge
from services import board_service as board
from services.contacts_service import initials

logger = logging.getLogger(__name__)

PRIORITY_COLORS = {"urgent": "#FF3D00", "medium": "#FF9900", "low": "#7AE229"}


class TaskForm(ttk.Frame):
    def __init__(self, parent, controller: AppController, mode: str = "add",
                 task: Optional[Task] = None, category: str = TODO,
                 on_submit: Optional[Callable[..., None]] = None, own_draft: bool = False):
        super().__init__(parent)
        self.controller = controller
        self.mode = mode
        self.category = category
        self.on_submit = on_submit
        # edit mode works on its own copies so Cancel leaves the board untouched
        self._task = copy.deepcopy(task) if task else None
        self._own_draft = own_draft or self._task is not None
        self._original_due = self._task.due_date if self._task else ""
        self._reset_own_draft()

        self.columnconfigure(0, weight=1)
        self.columnconfigure(1, weight=1)
        self._build_left()
        self._build_right()
        self._build_footer()
        if self._task:
            self._fill(self._task)
        self._render_priority()
        self._render_assignees()
        self._render_subtasks()
        self.validate_fields()

    # draft state: a private one (edit copy or column dialog), or the controller's add-task draft
    def _reset_own_draft(self):
        self._draft_priority = self._task.priority if self._task else DEFAULT_PRIORITY
        self._draft_assignees: List[Assignee] = list(self._task.assigned_to.values()) if self._task else []
        self._draft_subtasks: Dict[str, Subtask] = copy.deepcopy(self._task.subtasks) if self._task else {}

    @property
    def _priority(self) -> str:
        return self._draft_priority if self._own_draft else self.controller.task_priority

    @property
    def _subtasks(self) -> Dict[str, Subtask]:
        return self._draft_subtasks if self._own_draft else self.controller.draft_subtasks

    def _assignee_badges(self) -> List[Tuple[str, Optional[str]]]:
        people = self._draft_assignees if self._own_draft else self.controller.selected_contacts
        return [(p.name, p.color) for p in people]

    def _is_picked(self, contact: Contact) -> bool:
        if self._own_draft:
            return any(a.name == contact.name for a in self._draft_assignees)
        return self.controller.is_selected(contact.id)

    # ---------- layout ----------
    def _build_left(self):
        left = ttk.Frame(self)
        left.grid(row=0, column=0, sticky="nsew", padx=(0, 12))
        self.title_var = tk.StringVar()
        self.title_var.trace_add("write", lambda *_: self.validate_fields())
        ttk.Label(left, text="Title*").pack(anchor="w")
        ttk.Entry(left, textvariable=self.title_var).pack(fill="x", pady=(0, 8))
        ttk.Label(left, text="Description").pack(anchor="w")
        self.desc = tk.Text(left, height=5, wrap="word")
        self.desc.pack(fill="x", pady=(0, 8))

        ttk.Label(left, text="Assigned to").pack(anchor="w")
        self.search_var = tk.StringVar()
        self.search_var.trace_add("write", lambda *_: self._render_contact_picker())
        ttk.Entry(left, textvariable=self.search_var).pack(fill="x")
        self.picker = tk.Listbox(left, selectmode="multiple", height=6, exportselection=False)
        self.picker.pack(fill="x")
        self.picker.bind("<<ListboxSelect>>", self._on_pick)
        self._picker_ids: List[str] = []
        self.assignees = ttk.Frame(left)
        self.assignees.pack(fill="x", pady=(4, 0))
        self._render_contact_picker()

    def _build_right(self):
        right = ttk.Frame(self)
        right.grid(row=0, column=1, sticky="nsew")
        self.due_var = tk.StringVar()
        self.due_var.trace_add("write", lambda *_: self.validate_fields())
        ttk.Label(right, text="Due date* (YYYY-MM-DD)").pack(anchor="w")
        ttk.Entry(right, textvariable=self.due_var).pack(fill="x", pady=(0, 8))

        ttk.Label(right, text="Prio").pack(anchor="w")
        prio = ttk.Frame(right)
        prio.pack(fill="x", pady=(0, 8))
        self.prio_buttons: Dict[str, tk.Button] = {}
        for p in PRIORITIES:
            b = tk.Button(prio, text=p.capitalize(), relief="groove", command=lambda p=p: self._on_priority(p))
            b.pack(side="left", expand=True, fill="x", padx=2)
            self.prio_buttons[p] = b

        ttk.Label(right, text="Category*").pack(anchor="w")
        self.badge_var = tk.StringVar()
        badge = ttk.Combobox(right, textvariable=self.badge_var, values=BADGES, state="readonly")
        badge.pack(fill="x", pady=(0, 8))
        badge.bind("<<ComboboxSelected>>", lambda e: self.validate_fields())

        ttk.Label(right, text="Subtasks").pack(anchor="w")
        sub = ttk.Frame(right)
        sub.pack(fill="x")
        self.subtask_var = tk.StringVar()
        entry = ttk.Entry(sub, textvariable=self.subtask_var)
        entry.pack(side="left", fill="x", expand=True)
        entry.bind("<Return>", self._on_add_subtask)
        ttk.Button(sub, text="+", width=2, command=self._on_add_subtask).pack(side="left", padx=(4, 0))
        ttk.Button(sub, text="✕", width=2, command=lambda: self.subtask_var.set("")).pack(side="left")
        self.subtask_list = SubtaskList(right, checkable=False, on_edit=self._on_edit_subtask,
                                        on_delete=self._on_delete_subtask)
        self.subtask_list.pack(fill="x", pady=(4, 0))

    def _build_footer(self):
        footer = ttk.Frame(self)
        footer.grid(row=1, column=0, columnspan=2, sticky="we", pady=(12, 0))
        ttk.Label(footer, text="*This field is required").pack(side="left")
        self.error_var = tk.StringVar()
        ttk.Label(footer, textvariable=self.error_var, foreground="#B00020").pack(side="left", padx=12)
        label = "Create Task" if self.mode == "add" else "Ok"
        self.submit_btn = ttk.Button(footer, text=label, command=self._on_submit)
        self.submit_btn.pack(side="right")
        if self.mode == "add":
            ttk.Button(footer, text="Clear", command=self.clear).pack(side="right", padx=6)

    # ---------- render ----------
    def _fill(self, task: Task):
        self.title_var.set(task.title)
        self.desc.insert("1.0", task.description)
        self.due_var.set(task.due_date)
        self.badge_var.set(task.badge)

    def _render_priority(self):
        for p, b in self.prio_buttons.items():
            active = p == self._priority
            b.configure(bg=PRIORITY_COLORS[p] if active else "white", fg="white" if active else PRIORITY_COLORS[p])

    def _render_contact_picker(self):
        self.picker.delete(0, "end")
        self._picker_ids = []
        for c in self.controller.search_assignees(self.search_var.get()):
            self.picker.insert("end", f"{initials(c.name):<3} {c.name}")
            self._picker_ids.append(c.id)
            if self._is_picked(c):
                self.picker.selection_set("end")

    def _render_assignees(self):
        for child in self.assignees.winfo_children():
            child.destroy()
        for name, color in self._assignee_badges():
            initials_badge(self.assignees, initials(name), color).pack(side="left", padx=(0, 4))

    def _render_subtasks(self):
        self.subtask_list.set_subtasks(self._subtasks)

    def validate_fields(self) -> bool:
        """Enable the submit button only when title, category and due date are valid."""
        due = self.due_var.get().strip()
        due_invalid = not is_due_date_allowed(due, self._original_due)
        self.error_var.set(DUE_DATE_MSG if due_invalid and due else "")
        ok = bool(self.title_var.get().strip()) and self.badge_var.get() in BADGES and not due_invalid
        self.submit_btn.state(["!disabled"] if ok else ["disabled"])
        return ok

    # ---------- callbacks ----------
    def _on_priority(self, priority: str):
        if self._own_draft:
            self._draft_priority = "" if self._draft_priority == priority else priority
        else:
            self.controller.set_priority(priority)
        self._render_priority()

    def _on_pick(self, _event=None):
        chosen = {self._picker_ids[i] for i in self.picker.curselection()}
        by_id = contacts_by_id(self.controller.contacts)
        for cid in self._picker_ids:
            contact = by_id.get(cid)
            if contact is None or (cid in chosen) == self._is_picked(contact):
                continue
            if self._own_draft:
                self._draft_assignees = board.toggle_assignee(self._draft_assignees, contact)
            else:
                self.controller.toggle_assignee(cid)
        self._render_assignees()

    def _on_add_subtask(self, _event=None):
        try:
            board.add_subtask(self._subtasks, self.subtask_var.get())
        except ValidationError as e:
            self.error_var.set(str(e))
            return
        self.subtask_var.set("")
        self._render_subtasks()

    def _on_edit_subtask(self, subtask_id: str):
        current = self._subtasks.get(subtask_id)
        if current is None:
            return
        name = simpledialog.askstring("Edit subtask", "Subtask", initialvalue=current.name, parent=self)
        if name is None:
            return
        try:
            board.rename_subtask(self._subtasks, subtask_id, name)
        except ValidationError as e:
            self.error_var.set(str(e))
            return
        self._render_subtasks()

    def _on_delete_subtask(self, subtask_id: str):
        board.delete_subtask(self._subtasks, subtask_id)
        self._render_subtasks()

    def _on_submit(self):
        if not self.validate_fields():
            return
        title = self.title_var.get()
        desc = self.desc.get("1.0", "end").strip()
        due = self.due_var.get()
        badge = self.badge_var.get()
        try:
            if self._task:
                self.on_submit(
                    title=title.strip(), description=desc, due_date=due.strip(), badge=badge,
                    priority=self._priority, subtasks=self._subtasks,
                    assigned_to=board.renumber_assigned(self._draft_assignees),
                )
                return
            if self._own_draft:
                task = self.controller.create_task(
                    title, desc, due, badge, category=self.category, priority=self._draft_priority,
                    assignees=self._draft_assignees, subtasks=self._draft_subtasks,
                )
            else:
                task = self.controller.create_task(title, desc, due, badge, category=self.category)
        except ValidationError as e:
            self.error_var.set(str(e))
            return
        except FirebaseError as e:
            logger.error("Saving task failed: %s", e)
            mb.showerror("Task", f"Could not save the task:\n{e}")
            return
        self.winfo_toplevel().flash_status(f"Task added to board: {task.title}")
        self.clear()
        if self.on_submit:
            self.on_submit(task=task)

    def refresh_contacts(self):
        self._render_contact_picker()
        self._render_assignees()

    def clear(self):
        if self._own_draft:
            self._reset_own_draft()
        else:
            self.controller.reset_task_form()
        self.title_var.set("")
        self.desc.delete("1.0", "end")
        self.due_var.set("")
        self.badge_var.set("")
        self.search_var.set("")
        self.error_var.set("")
        self._render_priority()
        self._render_contact_picker()
        self._render_assignees()
        self._render_subtasks()
        self.validate_fields()
