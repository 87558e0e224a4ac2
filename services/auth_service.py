from __future__ import annotations
import logging
from typing import Optional

from core.models import GUEST, Contact, CurrentUser
from core.validation import validate_signup
from storage.firebase import FirebaseClient

logger = logging.getLogger(__name__)


def user_initials(name: str) -> str:
    if not name or name == GUEST:
        return "G"
    return "".join(part[0].upper() for part in name.split(" ") if part)[:2]


def is_authenticated(user: CurrentUser) -> bool:
    return user.name != ""


class AuthService:
    """Session identity is just the currentUser record; there are no tokens."""
    def __init__(self, client: FirebaseClient):
        self.client = client

    def login(self, email: str, password: str) -> Optional[Contact]:
        """Scan all contacts for an exact email/password pair.

        Returns None on mismatch. FirebaseError propagates so the caller can
        show the same generic failure either way.
        """
        root = self.client.fetch_root()
        for cid, data in (root.get("contacts") or {}).items():
            if not isinstance(data, dict):
                continue
            if data.get("email") == email and data.get("password") == password:
                contact = Contact.from_record(cid, data)
                self.client.set_current_user(contact.name)
                logger.info("Login ok: %s", contact.name)
                return contact
        logger.info("Login failed for %s", email)
        return None

    def guest_login(self) -> CurrentUser:
        self.client.set_current_user(GUEST)
        return CurrentUser(GUEST)

    def logout(self) -> None:
        self.client.set_current_user("")
        logger.info("Logged out")

    def signup(self, name: str, email: str, password: str, confirm: str, accept_policy: bool) -> str:
        validate_signup(email, password, confirm, accept_policy)
        new_id = self.client.create_contact({
            "name": name.strip(),
            "email": email.strip(),
            "password": password.strip(),
        })
        logger.info("Signed up: %s (%s)", name, new_id)
        return new_id

    def current_user(self) -> CurrentUser:
        return CurrentUser(self.client.fetch_current_user().get("name", ""))
