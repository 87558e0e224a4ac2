# tests/conftest.py

from __future__ import annotations

from typing import Any, Dict

import pytest

from controller.app_controller import AppController
from storage.firebase import FirebaseClient

from fakes import BASE_URL, FakeSession


@pytest.fixture()
def seed() -> Dict[str, Any]:
    """A small database as the web app leaves it: two contacts, three tasks."""
    return {
        "contacts": {
            "-c1": {"name": "Anton Mayer", "email": "anton@mayer.de", "phone": "0151123",
                    "color": "#FF7A00", "password": "secret"},
            "-c2": {"name": "berta Schulz", "email": "berta@schulz.de", "phone": "0170999"},
        },
        "tasks": {
            "-t1": {
                "title": "Kochwelt Page", "description": "Build start page", "dueDate": "2024-05-20",
                "priority": "urgent", "badge": "User Story", "category": "To-Do",
                "assignedTo": {"contact1": {"name": "Anton Mayer", "color": "#FF7A00"}},
                "subtasks": [{"name": "Header", "completed": True}, {"name": "Footer", "completed": False}],
            },
            "-t2": {
                "title": "Fix login", "description": "", "dueDate": "2024-05-12",
                "priority": "low", "badge": "Technical Task", "category": "Done",
                "assignedTo": "",
            },
            "-t3": {
                "title": "CSS cleanup", "description": "Remove dead rules", "dueDate": "2024-06-01",
                "priority": "medium", "badge": "Technical Task", "category": "In Progress",
            },
        },
        "currentUser": {"name": ""},
    }


@pytest.fixture()
def session(seed: Dict[str, Any]) -> FakeSession:
    return FakeSession(seed)


@pytest.fixture()
def client(session: FakeSession) -> FirebaseClient:
    return FirebaseClient(BASE_URL, timeout=5, session=session)


@pytest.fixture()
def controller(client: FirebaseClient) -> AppController:
    return AppController(client)
