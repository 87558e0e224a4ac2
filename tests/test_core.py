# tests/test_core.py

from __future__ import annotations

import importlib
import logging
from pathlib import Path

import pytest

from core import config
from core.logging_setup import _ConsoleNoiseFilter, setup_logging
from core.models import GUEST, TODO, Contact, CurrentUser, Subtask, Task, contacts_by_id, parse_subtasks


# ---------- models ----------

def test_parse_subtasks_list_with_holes() -> None:
    raw = [{"name": "a", "completed": True}, None, {"name": "c"}]
    assert parse_subtasks(raw) == {"0": Subtask("a", True), "2": Subtask("c", False)}


def test_parse_subtasks_map_and_junk() -> None:
    assert parse_subtasks({"subtask-3": {"name": "x", "completed": False}}) == {"subtask-3": Subtask("x")}
    assert parse_subtasks("") == {}
    assert parse_subtasks(None) == {}
    assert parse_subtasks(42) == {}


def test_task_record_round_trip_names() -> None:
    task = Task.from_record("-t", {"title": "T", "dueDate": "2024-01-02", "assignedTo": ""})
    assert task.due_date == "2024-01-02"
    assert task.category == TODO
    assert task.assigned_to == {}
    rec = task.to_record()
    assert rec["dueDate"] == "2024-01-02"
    assert rec["assignedTo"] == ""
    assert rec["subtasks"] == {}


def test_contact_record_omits_missing_password() -> None:
    c = Contact.from_record("-c", {"name": "A B", "email": "a@b.de", "phone": "1"})
    assert c.to_record() == {"name": "A B", "email": "a@b.de", "phone": "1"}
    assert contacts_by_id([c]) == {"-c": c}


def test_current_user_guest() -> None:
    assert CurrentUser(GUEST).is_guest
    assert not CurrentUser("Anton").is_guest


# ---------- config ----------

def test_config_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JOIN_BASE_URL", "https://example.test/")
    monkeypatch.setenv("JOIN_REQUEST_TIMEOUT", "3")
    monkeypatch.setenv("JOIN_SYNC_INTERVAL_MS", "not-a-number")
    monkeypatch.setenv("JOIN_TOPMOST", "yes")
    monkeypatch.setenv("JOIN_LOG_LEVEL", "debug")
    try:
        cfg = importlib.reload(config)
        assert cfg.BASE_URL == "https://example.test/"
        assert cfg.REQUEST_TIMEOUT == 3
        assert cfg.SYNC_INTERVAL_MS == 60_000
        assert cfg.TOPMOST is True
        assert cfg.LOG_LEVEL == "DEBUG"
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_config_blank_env_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JOIN_WINDOW_GEOMETRY", "  ")
    try:
        assert importlib.reload(config).WINDOW_GEOMETRY == "1180x720"
    finally:
        monkeypatch.undo()
        importlib.reload(config)


# ---------- logging ----------

def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_keeps_third_party_quiet() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("services.board_service", logging.DEBUG))
    assert f.filter(_record("storage.firebase", logging.INFO))
    assert not f.filter(_record("urllib3.connectionpool", logging.DEBUG))
    assert f.filter(_record("urllib3.connectionpool", logging.WARNING))


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(tmp_path / "logs", "WARNING")
        assert log_file == tmp_path / "logs" / "join.log"
        logging.getLogger("controller.app_controller").info("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
