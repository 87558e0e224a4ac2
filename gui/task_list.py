"""
Scrollable containers and the subtask list widget
-------------------------------------------------
- ``ScrollableFrame``: Canvas + interior Frame with mousewheel support. Board
  columns and the contact list put their rows in ``.interior``.
- ``SubtaskList``: one ``SubtaskRow`` per subtask with
  - a Checkbutton for completion (optional, board detail only)
  - the subtask name (wrapping)
  - edit (✎) and delete (✕) buttons

The widgets are view-only state. Changes go through the callbacks passed to
the constructor; the owner re-renders with ``set_subtasks()``.
"""
from __future__ import annotations
from typing import Callable, Dict, Optional
import tkinter as tk
from tkinter import ttk

from core.models import Subtask


class ScrollableFrame(ttk.Frame):
    """Canvas + interior Frame pattern with proper mousewheel support."""
    def __init__(self, master, **kwargs):
        super().__init__(master, **kwargs)
        self.canvas = tk.Canvas(self, highlightthickness=0)
        self.vbar = ttk.Scrollbar(self, orient="vertical", command=self.canvas.yview)
        self.canvas.configure(yscrollcommand=self.vbar.set)

        self.canvas.grid(row=0, column=0, sticky="nsew")
        self.vbar.grid(row=0, column=1, sticky="ns")
        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)

        self.interior = ttk.Frame(self.canvas)
        self._win_id = self.canvas.create_window(0, 0, window=self.interior, anchor="nw")

        self.interior.bind("<Configure>", self._on_interior_configure)
        self.canvas.bind("<Configure>", self._on_canvas_configure)
        # only scroll the list under the pointer
        self.canvas.bind("<Enter>", self._bind_mousewheel)
        self.canvas.bind("<Leave>", self._unbind_mousewheel)

    def clear(self):
        for child in self.interior.winfo_children():
            child.destroy()
        self.update_scrollregion()

    def update_scrollregion(self):
        self.update_idletasks()
        self.canvas.configure(scrollregion=self.canvas.bbox("all"))

    def scroll_to(self, widget):
        self.canvas.update_idletasks()
        height = self.interior.winfo_height()
        if height > 0:
            self.canvas.yview_moveto(widget.winfo_y() / height)

    def _on_interior_configure(self, _):
        self.update_scrollregion()

    def _on_canvas_configure(self, event):
        # keep interior width synced to canvas for wrapping
        self.canvas.itemconfigure(self._win_id, width=event.width)

    def _bind_mousewheel(self, _=None):
        self.canvas.bind_all("<MouseWheel>", self._on_mousewheel_windows_mac)
        self.canvas.bind_all("<Button-4>", self._on_mousewheel_linux)
        self.canvas.bind_all("<Button-5>", self._on_mousewheel_linux)

    def _unbind_mousewheel(self, _=None):
        self.canvas.unbind_all("<MouseWheel>")
        self.canvas.unbind_all("<Button-4>")
        self.canvas.unbind_all("<Button-5>")

    def _on_mousewheel_windows_mac(self, event):
        # Windows: event.delta is +/-120; macOS reports smaller steps
        delta = int(-1 * (event.delta / 120)) or (-1 if event.delta > 0 else 1)
        self.canvas.yview_scroll(delta, "units")

    def _on_mousewheel_linux(self, event):
        if event.num == 4:
            self.canvas.yview_scroll(-1, "units")
        elif event.num == 5:
            self.canvas.yview_scroll(1, "units")


class SubtaskRow(ttk.Frame):
    def __init__(
        self,
        master,
        subtask_id: str,
        name: str,
        completed: bool = False,
        checkable: bool = True,
        on_toggle: Optional[Callable[[str], None]] = None,
        on_edit: Optional[Callable[[str], None]] = None,
        on_delete: Optional[Callable[[str], None]] = None,
        wrap: int = 320,
    ):
        super().__init__(master)
        self.subtask_id = subtask_id
        self._on_toggle = on_toggle
        self._on_edit = on_edit
        self._on_delete = on_delete
        self.var = tk.BooleanVar(value=completed)
        self.columnconfigure(1, weight=1)

        if checkable:
            ttk.Checkbutton(self, variable=self.var, command=self._toggle).grid(row=0, column=0, padx=(4, 6))
        else:
            ttk.Label(self, text="•").grid(row=0, column=0, padx=(4, 6))
        self.lbl = ttk.Label(self, text=name, wraplength=wrap, anchor="w", justify="left")
        self.lbl.grid(row=0, column=1, sticky="we")
        if on_edit:
            ttk.Button(self, text="✎", width=2, command=self._edit).grid(row=0, column=2, padx=(6, 2))
        if on_delete:
            ttk.Button(self, text="✕", width=2, command=self._delete).grid(row=0, column=3, padx=(0, 4))

    def _toggle(self):
        if self._on_toggle:
            self._on_toggle(self.subtask_id)

    def _edit(self):
        if self._on_edit:
            self._on_edit(self.subtask_id)

    def _delete(self):
        if self._on_delete:
            self._on_delete(self.subtask_id)


class SubtaskList(ttk.Frame):
    def __init__(self, master, checkable: bool = True, on_toggle=None, on_edit=None, on_delete=None, **kwargs):
        super().__init__(master, **kwargs)
        self._checkable = checkable
        self._callbacks = dict(on_toggle=on_toggle, on_edit=on_edit, on_delete=on_delete)
        self._rows: Dict[str, SubtaskRow] = {}

    def set_subtasks(self, subtasks: Dict[str, Subtask]):
        for row in self._rows.values():
            row.destroy()
        self._rows.clear()
        for sid, s in subtasks.items():
            row = SubtaskRow(self, sid, s.name, s.completed, checkable=self._checkable, **self._callbacks)
            row.pack(fill="x", pady=1)
            self._rows[sid] = row


# --- Utility: pick readable text color for a given bg ---
def ideal_text_color(bg_hex: str) -> str:
    """Return black or white depending on background brightness."""
    bg_hex = (bg_hex or "").strip().lstrip('#')
    if len(bg_hex) == 3:
        bg_hex = ''.join(c*2 for c in bg_hex)
    try:
        r = int(bg_hex[0:2], 16)
        g = int(bg_hex[2:4], 16)
        b = int(bg_hex[4:6], 16)
    except ValueError:
        return "black"
    # perceived luminance
    luminance = 0.299*r + 0.587*g + 0.114*b
    return "black" if luminance > 186 else "white"


def initials_badge(master, text: str, color: Optional[str], font=("Segoe UI", 9, "bold")) -> tk.Label:
    """Small colored label used for contact initials."""
    color = color or "#A8A8A8"
    return tk.Label(master, text=text, bg=color, fg=ideal_text_color(color), font=font,
                    width=3, padx=2, pady=2, borderwidth=0, relief="flat")
