from __future__ import annotations
import logging
import random
from typing import Any, Dict, List, Optional, Tuple

from core.exceptions import FirebaseError
from core.models import Contact
from core.validation import validate_contact_fields
from storage.firebase import FirebaseClient

logger = logging.getLogger(__name__)

HEX_DIGITS = "0123456789ABCDEF"


def generate_random_color(rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return "#" + "".join(rng.choice(HEX_DIGITS) for _ in range(6))


def process_contacts(raw: Dict[str, Dict[str, Any]]) -> List[Contact]:
    """id -> record map into contacts sorted by name, missing colors filled in."""
    contacts = []
    for cid, data in (raw or {}).items():
        if not isinstance(data, dict):
            continue
        c = Contact.from_record(cid, data)
        if not c.color:
            c.color = generate_random_color()
        contacts.append(c)
    contacts.sort(key=lambda c: c.name.casefold())
    return contacts


def initials_and_first_letter(contact: Contact) -> Tuple[str, str]:
    parts = contact.name.split(" ")
    first = parts[0][:1].upper()
    last = parts[1][:1].upper() if len(parts) > 1 else ""
    return first + last, contact.name[:1].upper()


def initials(name: str) -> str:
    return initials_and_first_letter(Contact(id="", name=name))[0]


def group_by_first_letter(contacts: List[Contact]) -> List[Tuple[str, List[Contact]]]:
    """Ordered (letter, contacts) groups; expects contacts already sorted."""
    groups: List[Tuple[str, List[Contact]]] = []
    for c in contacts:
        _, letter = initials_and_first_letter(c)
        if not groups or groups[-1][0] != letter:
            groups.append((letter, []))
        groups[-1][1].append(c)
    return groups


def filter_contacts(contacts: List[Contact], term: str) -> List[Contact]:
    term = (term or "").strip().lower()
    if not term:
        return list(contacts)
    return [c for c in contacts if c.name.lower().startswith(term)]


class ContactsService:
    def __init__(self, client: FirebaseClient):
        self.client = client

    def load_contacts(self) -> List[Contact]:
        """Fetch, sort and backfill colors. Errors are logged and give an empty list."""
        try:
            raw = self.client.fetch_contacts()
            contacts = process_contacts(raw)
            self.ensure_colors(contacts, raw)
            return contacts
        except FirebaseError:
            logger.exception("Error loading contacts")
            return []

    def ensure_colors(self, contacts: List[Contact], raw: Dict[str, Dict[str, Any]]) -> None:
        for c in contacts:
            if not raw.get(c.id, {}).get("color"):
                try:
                    self.client.save_contact_color(c.id, c.color)
                except FirebaseError as e:
                    logger.warning("Could not save color for contact %s: %s", c.id, e)

    def create_contact(self, name: str, email: str, phone: str) -> Contact:
        validate_contact_fields(name, email, phone)
        contact = Contact(id="", name=name.strip(), email=email.strip(), phone=phone.strip(),
                          color=generate_random_color())
        contact.id = self.client.create_contact(contact.to_record())
        logger.info("Contact created: %s (%s)", contact.name, contact.id)
        return contact

    def update_contact(self, contact_id: str, name: str, email: str, phone: str) -> Contact:
        """Merge the edited fields into the stored record and PUT it back."""
        validate_contact_fields(name, email, phone)
        existing = self.client.fetch_contact(contact_id)
        merged = {**existing, "name": name.strip(), "email": email.strip(), "phone": phone.strip()}
        self.client.update_contact(contact_id, merged)
        logger.info("Contact updated: %s", contact_id)
        return Contact.from_record(contact_id, merged)

    def delete_contact(self, contact_id: str) -> None:
        self.client.delete_contact(contact_id)
        logger.info("Contact deleted: %s", contact_id)
