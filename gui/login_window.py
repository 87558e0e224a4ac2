import logging
import tkinter as tk
from tkinter import ttk, messagebox as mb

from controller.app_controller import AppController
from core.exceptions import FirebaseError, ValidationError
from core.validation import is_valid_account_email

logger = logging.getLogger(__name__)

LOGIN_FAILED_MSG = "Login failed. Please check your email and password and try again."


class LoginWindow(tk.Tk):
    """Log in / sign up. ``authenticated`` tells app.main whether to go on."""
    def __init__(self, controller: AppController):
        super().__init__()
        self.controller = controller
        self.authenticated = False
        self.title("Join · Log in")
        self.geometry("420x380")
        self.configure(padx=16, pady=16)
        self.resizable(False, False)

        self.login_frame = self._build_login()
        self.signup_frame = self._build_signup()
        self.show_login()

    # ---------- layout ----------
    def _build_login(self) -> ttk.Frame:
        f = ttk.Frame(self)
        ttk.Label(f, text="Log in", font=("Segoe UI", 18, "bold")).pack(pady=(0, 12))
        self.email_var = tk.StringVar()
        self.password_var = tk.StringVar()
        ttk.Label(f, text="Email").pack(anchor="w")
        email = ttk.Entry(f, textvariable=self.email_var)
        email.pack(fill="x", pady=(0, 8))
        ttk.Label(f, text="Password").pack(anchor="w")
        self.password_entry = ttk.Entry(f, textvariable=self.password_var, show="•")
        self.password_entry.pack(fill="x")
        self.show_pw = tk.BooleanVar(value=False)
        ttk.Checkbutton(f, text="Show password", variable=self.show_pw,
                        command=lambda: self.password_entry.configure(show="" if self.show_pw.get() else "•")
                        ).pack(anchor="w", pady=(4, 12))
        buttons = ttk.Frame(f)
        buttons.pack(fill="x")
        ttk.Button(buttons, text="Log in", command=self._on_login).pack(side="left", expand=True, fill="x")
        ttk.Button(buttons, text="Guest Log in", command=self._on_guest).pack(side="left", expand=True, fill="x", padx=(8, 0))
        bottom = ttk.Frame(f)
        bottom.pack(fill="x", pady=(18, 0))
        ttk.Label(bottom, text="Not a Join user?").pack(side="left")
        ttk.Button(bottom, text="Sign up", command=self.show_signup).pack(side="right")
        self.bind("<Return>", lambda e: self._on_login() if self.login_frame.winfo_ismapped() else self._on_signup())
        email.focus_set()
        return f

    def _build_signup(self) -> ttk.Frame:
        f = ttk.Frame(self)
        head = ttk.Frame(f)
        head.pack(fill="x", pady=(0, 12))
        ttk.Button(head, text="←", width=3, command=self.show_login).pack(side="left")
        ttk.Label(head, text="Sign up", font=("Segoe UI", 18, "bold")).pack(side="left", padx=12)
        self.su_vars = {k: tk.StringVar() for k in ("name", "email", "password", "confirm")}
        for key, label in (("name", "Name"), ("email", "Email"),
                           ("password", "Password"), ("confirm", "Confirm password")):
            ttk.Label(f, text=label).pack(anchor="w")
            show = "•" if key in ("password", "confirm") else ""
            ttk.Entry(f, textvariable=self.su_vars[key], show=show).pack(fill="x", pady=(0, 6))
        self.accept_policy = tk.BooleanVar(value=False)
        ttk.Checkbutton(f, text="I accept the privacy policy", variable=self.accept_policy).pack(anchor="w", pady=6)
        ttk.Button(f, text="Sign up", command=self._on_signup).pack(fill="x")
        return f

    def show_login(self):
        self.signup_frame.pack_forget()
        self.login_frame.pack(fill="both", expand=True)

    def show_signup(self):
        self.login_frame.pack_forget()
        self.signup_frame.pack(fill="both", expand=True)

    # ---------- actions ----------
    def _on_login(self):
        email = self.email_var.get().strip()
        if not is_valid_account_email(email):
            mb.showwarning("Log in", "Please enter a valid email address.")
            return
        try:
            ok = self.controller.login(email, self.password_var.get())
        except FirebaseError as e:
            logger.error("Login error: %s", e)
            ok = False
        if not ok:
            mb.showerror("Log in", LOGIN_FAILED_MSG)
            return
        self._finish()

    def _on_guest(self):
        try:
            self.controller.guest_login()
        except FirebaseError as e:
            logger.error("Guest login error: %s", e)
            mb.showerror("Log in", LOGIN_FAILED_MSG)
            return
        self._finish()

    def _on_signup(self):
        v = {k: var.get() for k, var in self.su_vars.items()}
        if not v["name"].strip():
            mb.showwarning("Sign up", "Please enter your name.")
            return
        try:
            self.controller.signup(v["name"], v["email"].strip(), v["password"], v["confirm"], self.accept_policy.get())
        except ValidationError as e:
            mb.showwarning("Sign up", str(e))
            return
        except FirebaseError as e:
            logger.error("Signup error: %s", e)
            mb.showerror("Sign up", f"Could not sign up:\n{e}")
            return
        mb.showinfo("Sign up", "You signed up successfully.")
        self.email_var.set(v["email"].strip())
        for var in self.su_vars.values():
            var.set("")
        self.accept_policy.set(False)
        self.show_login()

    def _finish(self):
        self.authenticated = True
        self.destroy()
