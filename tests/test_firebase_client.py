# tests/test_firebase_client.py

from __future__ import annotations

import pytest

from core.exceptions import FirebaseError
from storage.firebase import FirebaseClient

from fakes import BASE_URL, FakeResponse, FakeSession, connection_error


def test_url_building(client: FirebaseClient) -> None:
    assert client._url("contacts") == f"{BASE_URL}/contacts.json"
    assert client._url("/tasks/-t1/") == f"{BASE_URL}/tasks/-t1.json"
    assert client._url("") == f"{BASE_URL}/.json"


def test_trailing_slash_on_base_url(session: FakeSession) -> None:
    c = FirebaseClient(BASE_URL + "/", session=session)
    assert c._url("tasks") == f"{BASE_URL}/tasks.json"


def test_sets_json_header_and_timeout(client: FirebaseClient, session: FakeSession) -> None:
    client.fetch_contacts()
    assert session.headers["Content-Type"] == "application/json"
    assert session.timeouts == [5]


def test_get_missing_node_is_none(client: FirebaseClient) -> None:
    assert client.get_data("nothing/here") is None
    assert client.fetch_tasks()  # seeded


def test_empty_collections_come_back_as_dicts() -> None:
    c = FirebaseClient(BASE_URL, session=FakeSession())
    assert c.fetch_contacts() == {}
    assert c.fetch_tasks() == {}
    assert c.fetch_root() == {}
    assert c.fetch_current_user() == {"name": ""}


def test_create_returns_generated_key(client: FirebaseClient, session: FakeSession) -> None:
    new_id = client.create_contact({"name": "Carl Berg", "email": "carl@berg.de", "phone": "1"})
    assert new_id.startswith("-N")
    assert session.node(f"contacts/{new_id}")["name"] == "Carl Berg"
    assert session.calls[-1] == ("POST", "contacts", {"name": "Carl Berg", "email": "carl@berg.de", "phone": "1"})


def test_create_without_name_in_response_fails(client: FirebaseClient, session: FakeSession) -> None:
    session.request = lambda *a, **kw: FakeResponse(200, {})
    with pytest.raises(FirebaseError, match="Missing id"):
        client.create_task({"title": "x"})


def test_fetch_missing_contact_is_404(client: FirebaseClient) -> None:
    with pytest.raises(FirebaseError) as exc:
        client.fetch_contact("-nope")
    assert exc.value.status_code == 404


def test_patch_paths(client: FirebaseClient, session: FakeSession) -> None:
    client.patch_task("-t3", category="Done")
    client.patch_subtask("-t1", "1", completed=True)
    client.save_contact_color("-c2", "#123ABC")
    assert session.calls_for("PATCH") == [
        ("PATCH", "tasks/-t3", {"category": "Done"}),
        ("PATCH", "tasks/-t1/subtasks/1", {"completed": True}),
        ("PATCH", "contacts/-c2", {"color": "#123ABC"}),
    ]
    assert session.node("tasks/-t3/category") == "Done"
    assert session.node("tasks/-t1/subtasks/1/completed") is True
    # the sibling subtask survives the PATCH
    assert session.node("tasks/-t1/subtasks/0/name") == "Header"


def test_put_and_delete(client: FirebaseClient, session: FakeSession) -> None:
    client.update_task("-t2", {"title": "Replaced"})
    assert session.node("tasks/-t2") == {"title": "Replaced"}
    client.delete_task("-t2")
    assert session.node("tasks/-t2") is None
    client.delete_contact("-c1")
    assert "-c1" not in session.node("contacts")


def test_current_user(client: FirebaseClient, session: FakeSession) -> None:
    client.set_current_user("Anton Mayer")
    assert session.node("currentUser") == {"name": "Anton Mayer"}
    assert client.fetch_current_user() == {"name": "Anton Mayer"}


def test_http_error_carries_status(client: FirebaseClient, session: FakeSession) -> None:
    session.fail_with = 500
    with pytest.raises(FirebaseError) as exc:
        client.fetch_tasks()
    assert exc.value.status_code == 500
    assert "GET tasks" in str(exc.value)


def test_transport_error_is_wrapped(client: FirebaseClient, session: FakeSession) -> None:
    session.fail_with = connection_error()
    with pytest.raises(FirebaseError) as exc:
        client.put_data("currentUser", {"name": ""})
    assert exc.value.status_code is None


def test_invalid_json(client: FirebaseClient, session: FakeSession) -> None:
    session.request = lambda *a, **kw: FakeResponse(200, text="<html>")
    with pytest.raises(FirebaseError, match="invalid JSON"):
        client.get_data("tasks")
