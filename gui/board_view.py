"""
Kanban board
------------
Four columns (To-Do, In Progress, Await Feedback, Done) filled with task cards.

- Drag a card onto another column to move it; right click for a "Move to" menu.
- Click a card to open ``TaskDetailDialog``: subtask checkboxes, Edit, Delete.
- The search box filters by title and description as you type.
"""
from __future__ import annotations
import logging
import tkinter as tk
from tkinter import ttk, messagebox as mb
from typing import Dict, Optional

from controller.app_controller import AppController
from core.exceptions import FirebaseError, ValidationError
from core.models import CATEGORIES, DONE, Task
from gui.task_form import PRIORITY_COLORS, TaskForm
from gui.task_list import ScrollableFrame, SubtaskList, ideal_text_color, initials_badge
from services import board_service as board
from services.contacts_service import initials
from services.summary_service import format_date_ddmmyyyy

logger = logging.getLogger(__name__)

CARD_BG = "white"
DROP_BG = "#E7E7E7"
DRAG_THRESHOLD = 5


class BoardTab(ttk.Frame):
    def __init__(self, parent, controller: AppController, on_changed=None):
        super().__init__(parent)
        self.controller = controller
        self.on_changed = on_changed
        self._drag: Optional[dict] = None

        header = ttk.Frame(self)
        header.pack(fill="x", pady=(6, 4))
        ttk.Label(header, text="Board", font=("Segoe UI", 18, "bold")).pack(side="left")
        self.search_var = tk.StringVar()
        self.search_var.trace_add("write", lambda *_: self.render())
        ttk.Entry(header, textvariable=self.search_var, width=30).pack(side="right")
        ttk.Label(header, text="Find Task").pack(side="right", padx=(0, 6))

        body = ttk.Frame(self)
        body.pack(fill="both", expand=True)
        self.columns: Dict[str, ScrollableFrame] = {}
        for i, category in enumerate(CATEGORIES):
            body.columnconfigure(i, weight=1, uniform="col")
            col = ttk.Frame(body)
            col.grid(row=0, column=i, sticky="nsew", padx=4)
            head = ttk.Frame(col)
            head.pack(fill="x")
            ttk.Label(head, text=category, font=("Segoe UI", 11, "bold")).pack(side="left")
            if category != DONE:
                ttk.Button(head, text="+", width=2,
                           command=lambda c=category: self._on_add(c)).pack(side="right")
            frame = ScrollableFrame(col)
            frame.pack(fill="both", expand=True, pady=(4, 0))
            # drop target lookup walks up to a widget carrying `category`
            frame.category = category
            frame.canvas.category = category
            frame.interior.category = category
            self.columns[category] = frame
        body.rowconfigure(0, weight=1)
        self._canvas_bg = frame.canvas.cget("background")

    # ---------- data ----------
    def refresh(self) -> int:
        self.controller.load_tasks()
        self.render()
        return len(self.controller.tasks)

    def render(self):
        grouped = self.controller.board_columns(self.search_var.get())
        for category, frame in self.columns.items():
            frame.clear()
            tasks = grouped[category]
            if not tasks:
                tk.Label(frame.interior, text=board.empty_column_text(category), fg="#A8A8A8",
                         bg=DROP_BG, pady=12).pack(fill="x", padx=4, pady=4)
            for task in tasks:
                self._card(frame, task)
            frame.update_scrollregion()

    def _card(self, frame: ScrollableFrame, task: Task):
        view = board.card_view(task)
        card = tk.Frame(frame.interior, bg=CARD_BG, padx=10, pady=8, highlightthickness=1,
                        highlightbackground="#D1D1D1")
        card.pack(fill="x", padx=4, pady=4)
        card.category = task.category

        tk.Label(card, text=view["badge"] or "-", bg=view["badge_color"],
                 fg=ideal_text_color(view["badge_color"]), padx=6).pack(anchor="w")
        tk.Label(card, text=view["title"], bg=CARD_BG, font=("Segoe UI", 10, "bold"),
                 anchor="w", justify="left", wraplength=220).pack(anchor="w", pady=(6, 0))
        if view["description"]:
            tk.Label(card, text=view["description"], bg=CARD_BG, fg="#A8A8A8", anchor="w",
                     justify="left", wraplength=220).pack(anchor="w")
        if view["progress"]:
            row = tk.Frame(card, bg=CARD_BG)
            row.pack(fill="x", pady=(6, 0))
            bar = ttk.Progressbar(row, maximum=1.0, value=view["progress_ratio"], length=120)
            bar.pack(side="left")
            tk.Label(row, text=view["progress"], bg=CARD_BG).pack(side="left", padx=6)

        bottom = tk.Frame(card, bg=CARD_BG)
        bottom.pack(fill="x", pady=(6, 0))
        for text, color in view["avatars"]:
            initials_badge(bottom, text, color).pack(side="left", padx=(0, 2))
        if view["extra_count"]:
            initials_badge(bottom, f"+{view['extra_count']}", "#2A3647").pack(side="left")
        if view["priority"]:
            tk.Label(bottom, text=view["priority"].capitalize(), bg=CARD_BG,
                     fg=PRIORITY_COLORS.get(view["priority"], "black")).pack(side="right")

        for w in (card, *card.winfo_children(), *bottom.winfo_children()):
            w.bind("<ButtonPress-1>", lambda e, tid=task.id: self._drag_start(e, tid))
            w.bind("<B1-Motion>", self._drag_motion)
            w.bind("<ButtonRelease-1>", self._drag_end)
            w.bind("<Button-3>", lambda e, t=task, m=view["movable"]: self._move_menu(e, t, m))

    # ---------- drag & drop ----------
    def _drag_start(self, event, task_id: str):
        self._drag = {"id": task_id, "x": event.x_root, "y": event.y_root, "moved": False, "over": None}

    def _drag_motion(self, event):
        if not self._drag:
            return
        if abs(event.x_root - self._drag["x"]) + abs(event.y_root - self._drag["y"]) > DRAG_THRESHOLD:
            self._drag["moved"] = True
            self.configure(cursor="fleur")
        target = self._column_at(event.x_root, event.y_root)
        if target != self._drag["over"]:
            self._paint_drop(self._drag["over"], False)
            self._paint_drop(target, True)
            self._drag["over"] = target

    def _drag_end(self, event):
        drag, self._drag = self._drag, None
        self.configure(cursor="")
        if not drag:
            return
        self._paint_drop(drag["over"], False)
        if not drag["moved"]:
            self._open(drag["id"])
            return
        target = self._column_at(event.x_root, event.y_root)
        task = self.controller.get_task(drag["id"])
        if target and task and target != task.category:
            self._move(drag["id"], target)

    def _column_at(self, x: int, y: int) -> Optional[str]:
        w = self.winfo_containing(x, y)
        while w is not None and w is not self:
            category = getattr(w, "category", None)
            if category:
                return category
            w = w.master
        return None

    def _paint_drop(self, category: Optional[str], on: bool):
        if category in self.columns:
            canvas = self.columns[category].canvas
            canvas.configure(background=DROP_BG if on else self._canvas_bg)

    def _move_menu(self, event, task: Task, movable: bool):
        menu = tk.Menu(self, tearoff=False)
        if movable:
            for category in CATEGORIES:
                if category != task.category:
                    menu.add_command(label=f"Move to {category}", command=lambda c=category: self._move(task.id, c))
            menu.add_separator()
        menu.add_command(label="Open", command=lambda: self._open(task.id))
        try:
            menu.tk_popup(event.x_root, event.y_root)
        finally:
            menu.grab_release()

    # ---------- actions ----------
    def _move(self, task_id: str, category: str):
        try:
            task = self.controller.move_task(task_id, category)
        except (ValidationError, FirebaseError) as e:
            logger.error("Move failed: %s", e)
            mb.showerror("Board", f"Could not move the task:\n{e}")
            self.refresh()
            return
        self.render()
        self._changed()
        self.winfo_toplevel().flash_status(f"Moved \"{task.title}\" to {category}")

    def _open(self, task_id: str):
        task = self.controller.open_task(task_id)
        if task is not None:
            TaskDetailDialog(self, self.controller, task, on_close=self._on_detail_closed)

    def _on_detail_closed(self):
        self.controller.close_task()
        self.render()
        self._changed()

    def _on_add(self, category: str):
        AddTaskDialog(self, self.controller, category, on_done=self._on_detail_closed)

    def _changed(self):
        if self.on_changed:
            self.on_changed()


class TaskDetailDialog(tk.Toplevel):
    def __init__(self, parent, controller: AppController, task: Task, on_close=None):
        super().__init__(parent)
        self.controller = controller
        self.task_id = task.id
        self._on_close = on_close
        self.title(task.title)
        self.configure(padx=16, pady=16, bg=CARD_BG)
        self.transient(parent.winfo_toplevel())
        self.protocol("WM_DELETE_WINDOW", self.close)
        self.bind("<Escape>", lambda e: self.close())
        self.body = tk.Frame(self, bg=CARD_BG)
        self.body.pack(fill="both", expand=True)
        self.show_detail()
        self.grab_set()

    def _clear(self):
        for child in self.body.winfo_children():
            child.destroy()

    def show_detail(self):
        self._clear()
        task = self.controller.get_task(self.task_id)
        if task is None:
            self.close()
            return
        b = self.body
        color = board.badge_color(task.badge)
        tk.Label(b, text=task.badge or "-", bg=color, fg=ideal_text_color(color), padx=8).pack(anchor="w")
        tk.Label(b, text=task.title, bg=CARD_BG, font=("Segoe UI", 18, "bold"),
                 wraplength=420, justify="left").pack(anchor="w", pady=(8, 4))
        if task.description:
            tk.Label(b, text=task.description, bg=CARD_BG, wraplength=420, justify="left").pack(anchor="w")
        due = format_date_ddmmyyyy(task.due_date) if task.due_date.count("-") == 2 else task.due_date
        tk.Label(b, text=f"Due date:  {due}", bg=CARD_BG).pack(anchor="w", pady=(8, 0))
        tk.Label(b, text=f"Priority:  {task.priority.capitalize() or '-'}", bg=CARD_BG,
                 fg=PRIORITY_COLORS.get(task.priority, "black")).pack(anchor="w")

        tk.Label(b, text="Assigned To:", bg=CARD_BG).pack(anchor="w", pady=(8, 2))
        for a in task.assigned_to.values():
            if not a.name.strip():
                continue
            row = tk.Frame(b, bg=CARD_BG)
            row.pack(anchor="w", pady=1)
            initials_badge(row, initials(a.name), a.color).pack(side="left", padx=(8, 6))
            tk.Label(row, text=a.name, bg=CARD_BG).pack(side="left")

        tk.Label(b, text=f"Subtasks  ({board.progress_label(task.subtasks)})", bg=CARD_BG).pack(anchor="w", pady=(8, 2))
        subtasks = SubtaskList(b, checkable=True, on_toggle=self._on_toggle)
        subtasks.pack(fill="x")
        subtasks.set_subtasks(task.subtasks)

        actions = tk.Frame(b, bg=CARD_BG)
        actions.pack(fill="x", pady=(12, 0))
        ttk.Button(actions, text="Edit", command=self.show_edit).pack(side="right")
        ttk.Button(actions, text="Delete", command=self._on_delete).pack(side="right", padx=6)

    def show_edit(self):
        self._clear()
        task = self.controller.get_task(self.task_id)
        if task is None:
            self.close()
            return
        TaskForm(self.body, self.controller, mode="edit", task=task, on_submit=self._on_save).pack(fill="both", expand=True)

    # ---------- callbacks ----------
    def _on_toggle(self, subtask_id: str):
        try:
            self.controller.toggle_subtask(self.task_id, subtask_id)
        except (ValidationError, FirebaseError, KeyError) as e:
            logger.error("Subtask update failed: %s", e)
            mb.showerror("Subtasks", f"Could not update the subtask:\n{e}", parent=self)
        self.show_detail()

    def _on_save(self, **fields):
        try:
            self.controller.update_task(self.task_id, **fields)
        except (ValidationError, FirebaseError) as e:
            logger.error("Task update failed: %s", e)
            mb.showerror("Task", f"Could not save the task:\n{e}", parent=self)
            return
        self.show_detail()

    def _on_delete(self):
        if not mb.askyesno("Delete task", "Delete this task?", parent=self):
            return
        try:
            self.controller.delete_task(self.task_id)
        except (ValidationError, FirebaseError) as e:
            logger.error("Task delete failed: %s", e)
            mb.showerror("Task", f"Could not delete the task:\n{e}", parent=self)
            return
        self.close()

    def close(self):
        self.grab_release()
        self.destroy()
        if self._on_close:
            self._on_close()


class AddTaskDialog(tk.Toplevel):
    """Add-task form opened from a column's "+" button; the task lands in that column."""
    def __init__(self, parent, controller: AppController, category: str, on_done=None):
        super().__init__(parent)
        self.title(f"Add Task · {category}")
        self.configure(padx=16, pady=16)
        self.transient(parent.winfo_toplevel())
        self._on_done = on_done
        TaskForm(self, controller, mode="add", category=category, on_submit=self._submitted,
                 own_draft=True).pack(fill="both", expand=True)
        self.bind("<Escape>", lambda e: self.destroy())
        self.grab_set()

    def flash_status(self, msg: str):
        self.master.winfo_toplevel().flash_status(msg)

    def _submitted(self, task: Task):
        self.destroy()
        if self._on_done:
            self._on_done()
