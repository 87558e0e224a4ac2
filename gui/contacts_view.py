import logging
import tkinter as tk
from tkinter import ttk, messagebox as mb
from typing import Dict, Optional

from controller.app_controller import AppController
from core.exceptions import FirebaseError, ValidationError
from core.models import Contact
from gui.task_list import ScrollableFrame, initials_badge
from services.contacts_service import initials_and_first_letter

logger = logging.getLogger(__name__)

ACTIVE_BG = "#2A3647"


class ContactsTab(ttk.Frame):
    """Letter-grouped contact list on the left, the selected contact's card on the right."""
    def __init__(self, parent, controller: AppController):
        super().__init__(parent)
        self.controller = controller
        self._rows: Dict[str, tk.Frame] = {}

        left = ttk.Frame(self, width=320)
        left.pack(side="left", fill="y", padx=(0, 8))
        ttk.Button(left, text="Add new contact  +", command=self._on_add).pack(fill="x", pady=(6, 6))
        self.list = ScrollableFrame(left)
        self.list.pack(fill="both", expand=True)

        self.card = ttk.Frame(self)
        self.card.pack(side="left", fill="both", expand=True, padx=8, pady=8)

    # ---------- data ----------
    def refresh(self) -> int:
        self.controller.load_contacts()
        self._render_list()
        self._render_card(self.controller.active_contact)
        return len(self.controller.contacts)

    def _render_list(self):
        self.list.clear()
        self._rows.clear()
        for letter, contacts in self.controller.contact_groups():
            ttk.Label(self.list.interior, text=letter, font=("Segoe UI", 13, "bold")).pack(anchor="w", padx=8, pady=(10, 0))
            ttk.Separator(self.list.interior).pack(fill="x", padx=8, pady=(2, 4))
            for c in contacts:
                self._rows[c.id] = self._contact_row(c)
        self._highlight()
        self.list.update_scrollregion()

    def _contact_row(self, contact: Contact) -> tk.Frame:
        row = tk.Frame(self.list.interior, padx=6, pady=4)
        row.pack(fill="x", padx=6)
        text_initials, _ = initials_and_first_letter(contact)
        initials_badge(row, text_initials, contact.color).pack(side="left", padx=(0, 8))
        info = tk.Frame(row)
        info.pack(side="left", fill="x")
        name = tk.Label(info, text=contact.name, anchor="w")
        name.pack(anchor="w")
        email = tk.Label(info, text=contact.email, fg="#007CEE", anchor="w")
        email.pack(anchor="w")
        row.paintable = (row, info, name, email)
        for w in row.paintable:
            w.bind("<Button-1>", lambda e, cid=contact.id: self._on_select(cid))
        return row

    def _highlight(self):
        active = self.controller.active_contact
        default_bg = self.winfo_toplevel().cget("background")
        for cid, row in self._rows.items():
            selected = active is not None and active.id == cid
            bg = ACTIVE_BG if selected else default_bg
            for w in row.paintable:
                w.configure(bg=bg)
            row.paintable[2].configure(fg="white" if selected else "black")

    def _render_card(self, contact: Optional[Contact]):
        for child in self.card.winfo_children():
            child.destroy()
        if contact is None:
            ttk.Label(self.card, text="Contacts", font=("Segoe UI", 22, "bold")).pack(anchor="w")
            ttk.Label(self.card, text="Better with a team").pack(anchor="w")
            return
        head = ttk.Frame(self.card)
        head.pack(fill="x")
        text_initials, _ = initials_and_first_letter(contact)
        initials_badge(head, text_initials, contact.color, font=("Segoe UI", 20, "bold")).pack(side="left", padx=(0, 12))
        ttk.Label(head, text=contact.name, font=("Segoe UI", 20, "bold")).pack(side="left")
        actions = ttk.Frame(self.card)
        actions.pack(anchor="w", pady=8)
        ttk.Button(actions, text="Edit", command=lambda: self._on_edit(contact)).pack(side="left")
        ttk.Button(actions, text="Delete", command=lambda: self._on_delete(contact)).pack(side="left", padx=6)
        ttk.Label(self.card, text="Contact Information", font=("Segoe UI", 12, "bold")).pack(anchor="w", pady=(12, 6))
        ttk.Label(self.card, text="Email", font=("Segoe UI", 10, "bold")).pack(anchor="w")
        ttk.Label(self.card, text=contact.email, foreground="#007CEE").pack(anchor="w", pady=(0, 8))
        ttk.Label(self.card, text="Phone", font=("Segoe UI", 10, "bold")).pack(anchor="w")
        ttk.Label(self.card, text=contact.phone).pack(anchor="w")

    # ---------- actions ----------
    def _on_select(self, contact_id: str):
        contact = self.controller.select_contact(contact_id)
        self._highlight()
        self._render_card(contact)

    def _on_add(self):
        ContactDialog(self, "Add contact", on_save=self._save_new)

    def _on_edit(self, contact: Contact):
        ContactDialog(self, "Edit contact", contact=contact,
                      on_save=lambda n, e, p: self._save_existing(contact.id, n, e, p),
                      on_delete=lambda: self._on_delete(contact, confirm=False))

    def _save_new(self, name: str, email: str, phone: str) -> bool:
        return self._write(lambda: self.controller.add_contact(name, email, phone), "Contact successfully created")

    def _save_existing(self, contact_id: str, name: str, email: str, phone: str) -> bool:
        return self._write(lambda: self.controller.save_contact(contact_id, name, email, phone))

    def _on_delete(self, contact: Contact, confirm: bool = True):
        if confirm and not mb.askyesno("Delete contact", f"Delete {contact.name}?"):
            return
        self._write(lambda: self.controller.delete_contact(contact.id))

    def _write(self, action, success_msg: Optional[str] = None) -> bool:
        try:
            action()
        except ValidationError as e:
            mb.showwarning("Contacts", str(e))
            return False
        except FirebaseError as e:
            logger.error("Contact write failed: %s", e)
            mb.showerror("Contacts", f"Could not save the contact:\n{e}")
            return False
        self._render_list()
        self._render_card(self.controller.active_contact)
        active = self.controller.active_contact
        if active and active.id in self._rows:
            self.list.scroll_to(self._rows[active.id])
        if success_msg:
            self.winfo_toplevel().flash_status(success_msg)
        return True


class ContactDialog(tk.Toplevel):
    def __init__(self, parent, title: str, on_save, contact: Optional[Contact] = None, on_delete=None):
        super().__init__(parent)
        self.title(title)
        self.configure(padx=16, pady=16)
        self.transient(parent.winfo_toplevel())
        self.resizable(False, False)
        self._on_save = on_save
        self._on_delete = on_delete

        self.vars = {
            "name": tk.StringVar(value=contact.name if contact else ""),
            "email": tk.StringVar(value=contact.email if contact else ""),
            "phone": tk.StringVar(value=contact.phone if contact else ""),
        }
        for key, label in (("name", "Name"), ("email", "Email"), ("phone", "Phone")):
            ttk.Label(self, text=label).pack(anchor="w")
            ttk.Entry(self, textvariable=self.vars[key], width=40).pack(fill="x", pady=(0, 8))

        buttons = ttk.Frame(self)
        buttons.pack(fill="x", pady=(8, 0))
        if on_delete:
            ttk.Button(buttons, text="Delete", command=self._delete).pack(side="left")
        else:
            ttk.Button(buttons, text="Cancel", command=self.destroy).pack(side="left")
        ttk.Button(buttons, text="Save" if contact else "Create contact", command=self._save).pack(side="right")
        self.bind("<Escape>", lambda e: self.destroy())
        self.grab_set()

    def _save(self):
        if self._on_save(*(self.vars[k].get() for k in ("name", "email", "phone"))):
            self.destroy()

    def _delete(self):
        self.destroy()
        self._on_delete()
