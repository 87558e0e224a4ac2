"""Form validation for the login, signup, contact and task forms.

Each ``validate_*`` function raises ``ValidationError`` with the message the
UI shows; the small ``is_*`` predicates just answer yes/no.
"""
from __future__ import annotations
import datetime as dt
import re
from typing import Optional

from core.exceptions import ValidationError
from core.models import BADGES

# login / signup forms
ACCOUNT_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
# contact forms
CONTACT_EMAIL_RE = re.compile(r"^[^\s@]+@[a-zA-Z0-9-]+\.[a-zA-Z]{2,6}$")
PHONE_RE = re.compile(r"^[0-9]+$")

DUE_DATE_MSG = "The due date must be today or in the future."


def is_valid_account_email(email: str) -> bool:
    return bool(ACCOUNT_EMAIL_RE.match(email or ""))


def is_valid_contact_email(email: str) -> bool:
    return bool(CONTACT_EMAIL_RE.match(email or ""))


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_RE.match(phone or ""))


def has_first_and_last_name(name: str) -> bool:
    return len(name.split(" ")) >= 2


def validate_contact_fields(name: str, email: str, phone: str) -> None:
    name, email, phone = name.strip(), email.strip(), phone.strip()
    if not name or not email or not phone:
        raise ValidationError("Please complete all fields.")
    if not has_first_and_last_name(name):
        raise ValidationError("Please enter your first and last name.")
    if not is_valid_contact_email(email):
        raise ValidationError("Please enter a valid email address.")
    if not is_valid_phone(phone):
        raise ValidationError("Please enter a valid phone number.")


def validate_signup(email: str, password: str, confirm: str, accept_policy: bool) -> None:
    if not is_valid_account_email(email):
        raise ValidationError("Please enter a valid email address.")
    if password.strip() != confirm.strip():
        raise ValidationError("Your passwords don't match. Please try again.")
    if not accept_policy:
        raise ValidationError("Please accept the privacy policy.")


def is_due_date_empty_or_past(due_date: str, today: Optional[dt.date] = None) -> bool:
    if not due_date:
        return True
    try:
        d = dt.date.fromisoformat(due_date.strip()[:10])
    except ValueError:
        return True
    return d < (today or dt.date.today())


def is_due_date_allowed(due_date: str, unchanged_from: str = "", today: Optional[dt.date] = None) -> bool:
    """Today or later. When editing, the date the task already has also passes."""
    due = (due_date or "").strip()
    if due and due == (unchanged_from or "").strip():
        return True
    return not is_due_date_empty_or_past(due, today)


def validate_task_fields(title: str, badge: str, due_date: str, today: Optional[dt.date] = None) -> None:
    if not title.strip():
        raise ValidationError("Please enter a title.")
    if badge not in BADGES:
        raise ValidationError("Please select a task category.")
    if is_due_date_empty_or_past(due_date, today):
        raise ValidationError(DUE_DATE_MSG)


def validate_subtask_name(name: str, message: str = "Please enter a subtask.") -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError(message)
    return name
