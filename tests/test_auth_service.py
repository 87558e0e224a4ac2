# tests/test_auth_service.py

from __future__ import annotations

import pytest

from core.exceptions import FirebaseError, ValidationError
from core.models import GUEST, CurrentUser
from services.auth_service import AuthService, is_authenticated, user_initials
from storage.firebase import FirebaseClient

from fakes import FakeSession


def test_login_exact_match(client: FirebaseClient, session: FakeSession) -> None:
    contact = AuthService(client).login("anton@mayer.de", "secret")
    assert contact is not None and contact.id == "-c1"
    assert session.node("currentUser") == {"name": "Anton Mayer"}


@pytest.mark.parametrize("email,password", [
    ("anton@mayer.de", "Secret"),
    ("Anton@mayer.de", "secret"),
    ("anton@mayer.de", ""),
    ("berta@schulz.de", ""),   # contact without a password cannot log in
    ("nobody@x.de", "secret"),
])
def test_login_fails_closed(client: FirebaseClient, session: FakeSession, email: str, password: str) -> None:
    assert AuthService(client).login(email, password) is None
    assert session.calls_for("PUT") == []
    assert session.node("currentUser") == {"name": ""}


def test_login_network_error_propagates(client: FirebaseClient, session: FakeSession) -> None:
    session.fail_with = 503
    with pytest.raises(FirebaseError):
        AuthService(client).login("anton@mayer.de", "secret")


def test_guest_login_and_logout(client: FirebaseClient, session: FakeSession) -> None:
    auth = AuthService(client)
    user = auth.guest_login()
    assert user.is_guest
    assert session.node("currentUser") == {"name": GUEST}
    auth.logout()
    assert session.node("currentUser") == {"name": ""}
    assert not is_authenticated(auth.current_user())


def test_signup_posts_new_contact(client: FirebaseClient, session: FakeSession) -> None:
    new_id = AuthService(client).signup("Dora Dreher ", "dora@dreher.de", " pw1 ", "pw1", True)
    assert session.node(f"contacts/{new_id}") == {
        "name": "Dora Dreher", "email": "dora@dreher.de", "password": "pw1",
    }
    # a signed-up contact can log in right away
    assert AuthService(client).login("dora@dreher.de", "pw1").id == new_id


def test_signup_rejects_before_writing(client: FirebaseClient, session: FakeSession) -> None:
    with pytest.raises(ValidationError, match="privacy policy"):
        AuthService(client).signup("Dora Dreher", "dora@dreher.de", "pw", "pw", False)
    assert session.calls == []


def test_user_initials() -> None:
    assert user_initials("") == "G"
    assert user_initials(GUEST) == "G"
    assert user_initials("anton mayer") == "AM"
    assert user_initials("Anna Maria Schmidt") == "AM"
    assert user_initials("Cher") == "C"


def test_is_authenticated() -> None:
    assert is_authenticated(CurrentUser(GUEST))
    assert is_authenticated(CurrentUser("Anton Mayer"))
    assert not is_authenticated(CurrentUser())
