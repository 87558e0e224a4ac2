import datetime as dt
import logging
import tkinter as tk
from tkinter import ttk, messagebox as mb

from core.config import SYNC_INTERVAL_MS, TOPMOST, WINDOW_GEOMETRY
from controller.app_controller import AppController
from core.exceptions import FirebaseError
from gui.board_view import BoardTab
from gui.contacts_view import ContactsTab
from gui.task_form import TaskForm

logger = logging.getLogger(__name__)

STATUS_FLASH_MS = 2500


class MainWindow(tk.Tk):
    def __init__(self, controller: AppController):
        super().__init__()
        self.controller = controller
        self.logged_out = False
        self.title("Join · Kanban")
        self.geometry(WINDOW_GEOMETRY)
        self.configure(padx=8, pady=8)
        if TOPMOST:
            self.attributes("-topmost", True)

        # Top bar
        top = ttk.Frame(self)
        top.pack(fill="x", pady=(0, 6))
        ttk.Button(top, text="Log out", command=self._on_logout).pack(side="right", padx=(6, 0))
        ttk.Button(top, text="Sync", command=self._sync_all).pack(side="right")
        self.initials_var = tk.StringVar(value=controller.header_initials())
        tk.Label(top, textvariable=self.initials_var, font=("Segoe UI", 11, "bold"), fg="#29ABE2",
                 relief="solid", borderwidth=1, width=3).pack(side="right", padx=6)
        self.status_var = tk.StringVar(value="Ready")
        ttk.Label(top, textvariable=self.status_var).pack(side="left")
        self._status_after = None

        # Notebook
        self.nb = ttk.Notebook(self)
        self.nb.pack(fill="both", expand=True)
        self.summary_tab = SummaryTab(self.nb, controller, on_open_board=self.show_board)
        self.add_task_tab = ttk.Frame(self.nb, padding=12)
        self.task_form = TaskForm(self.add_task_tab, controller, mode="add", on_submit=self._on_task_added)
        self.task_form.pack(fill="both", expand=True)
        self.board_tab = BoardTab(self.nb, controller, on_changed=self.summary_tab.render)
        self.contacts_tab = ContactsTab(self.nb, controller)
        self.nb.add(self.summary_tab, text="Summary")
        self.nb.add(self.add_task_tab, text="Add Task")
        self.nb.add(self.board_tab, text="Board")
        self.nb.add(self.contacts_tab, text="Contacts")

        # timers / binds
        self.bind("<F5>", lambda e: self._sync_all())
        self._sync_all()
        self.after(SYNC_INTERVAL_MS, self._auto_sync)

    # ---------- sync ----------
    def _sync_all(self):
        contacts = self.contacts_tab.refresh()
        tasks = self.board_tab.refresh()
        # the add-task picker lists the freshly loaded contacts
        self.task_form.refresh_contacts()
        self.summary_tab.render()
        self.initials_var.set(self.controller.header_initials())
        self.status_var.set(f"Synced {dt.datetime.now().strftime('%H:%M:%S')} · {tasks} tasks · {contacts} contacts")

    def _auto_sync(self):
        try:
            self._sync_all()
        finally:
            self.after(SYNC_INTERVAL_MS, self._auto_sync)

    def flash_status(self, msg: str):
        """Show a confirmation in the top bar, then fall back to 'Ready'."""
        self.status_var.set(msg)
        if self._status_after:
            self.after_cancel(self._status_after)
        self._status_after = self.after(STATUS_FLASH_MS, lambda: self.status_var.set("Ready"))

    # ---------- actions ----------
    def show_board(self):
        self.nb.select(self.board_tab)

    def _on_task_added(self, task=None):
        self.board_tab.render()
        self.summary_tab.render()
        self.show_board()

    def _on_logout(self):
        try:
            self.controller.logout()
        except FirebaseError as e:
            logger.error("Logout error: %s", e)
            mb.showerror("Log out", f"Could not log out:\n{e}")
            return
        self.logged_out = True
        self.destroy()


class SummaryTab(ttk.Frame):
    """Counters per column, urgent tasks with the next deadline, and the greeting."""
    def __init__(self, parent, controller: AppController, on_open_board=None):
        super().__init__(parent, padding=16)
        self.controller = controller
        self.on_open_board = on_open_board
        self.vars = {k: tk.StringVar() for k in (
            "todo", "done", "urgent", "deadline", "total", "in_progress", "await_feedback",
            "greeting", "user_name")}

        ttk.Label(self, text="Join 360", font=("Segoe UI", 22, "bold")).grid(row=0, column=0, sticky="w")
        ttk.Label(self, text="Key Metrics at a Glance").grid(row=0, column=1, sticky="w", padx=12)

        grid = ttk.Frame(self)
        grid.grid(row=1, column=0, columnspan=2, sticky="nw", pady=(16, 0))
        self._tile(grid, 0, 0, "todo", "To-do")
        self._tile(grid, 0, 1, "done", "Done")
        self._tile(grid, 1, 0, "urgent", "Urgent")
        self._tile(grid, 1, 1, "deadline", "Upcoming Deadline")
        self._tile(grid, 2, 0, "total", "Tasks in Board")
        self._tile(grid, 2, 1, "in_progress", "Tasks in Progress")
        self._tile(grid, 3, 0, "await_feedback", "Awaiting Feedback")

        hello = ttk.Frame(self)
        hello.grid(row=1, column=2, sticky="n", padx=(32, 0), pady=(16, 0))
        ttk.Label(hello, textvariable=self.vars["greeting"], font=("Segoe UI", 20)).pack(anchor="w")
        ttk.Label(hello, textvariable=self.vars["user_name"], font=("Segoe UI", 24, "bold"),
                  foreground="#29ABE2").pack(anchor="w")

    def _tile(self, master, row: int, column: int, key: str, label: str):
        tile = tk.Frame(master, bg="white", padx=18, pady=12, highlightthickness=1,
                        highlightbackground="#D1D1D1", cursor="hand2")
        tile.grid(row=row, column=column, sticky="nsew", padx=6, pady=6)
        value = tk.Label(tile, textvariable=self.vars[key], bg="white", font=("Segoe UI", 20, "bold"))
        value.pack(anchor="w")
        caption = tk.Label(tile, text=label, bg="white")
        caption.pack(anchor="w")
        for w in (tile, value, caption):
            w.bind("<Button-1>", lambda e: self.on_open_board and self.on_open_board())

    def render(self):
        for key, value in self.controller.summary().items():
            self.vars[key].set(str(value))
