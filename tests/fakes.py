# tests/fakes.py

from __future__ import annotations

import copy
import itertools
import json as _json
from typing import Any, Dict, List, Optional, Tuple

import requests

BASE_URL = "https://join-test.firebaseio.example"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self.ok = status_code < 400
        self.text = text if text is not None else _json.dumps(payload)
        self.content = self.text.encode("utf-8")

    def json(self) -> Any:
        return _json.loads(self.text)


class FakeSession:
    """
    In-memory stand-in for requests.Session talking to a Realtime Database.

    - ``tree`` is the whole database; ``<path>.json`` addresses a node
    - POST stores under a generated key and answers ``{"name": key}``
    - every call is recorded in ``calls`` as (method, path, body)
    - ``fail_with`` makes the next calls raise or answer with an error status
    """

    def __init__(self, tree: Optional[Dict[str, Any]] = None) -> None:
        self.tree: Dict[str, Any] = copy.deepcopy(tree) if tree else {}
        self.headers: Dict[str, str] = {}
        self.calls: List[Tuple[str, str, Any]] = []
        self.timeouts: List[Any] = []
        self.fail_with: Any = None
        self._ids = itertools.count(1)

    # ---------- helpers for assertions ----------
    def node(self, path: str) -> Any:
        cur: Any = self.tree
        for part in [p for p in path.split("/") if p]:
            cur = _as_dict(cur)
            if not isinstance(cur, dict) or part not in cur:
                return None
            cur = cur[part]
        return cur

    def calls_for(self, method: str) -> List[Tuple[str, str, Any]]:
        return [c for c in self.calls if c[0] == method]

    # ---------- requests.Session surface ----------
    def request(self, method: str, url: str, json: Any = None, timeout: Any = None) -> FakeResponse:
        assert url.startswith(BASE_URL + "/") and url.endswith(".json"), url
        path = url[len(BASE_URL) + 1:-len(".json")].strip("/")
        self.calls.append((method, path, copy.deepcopy(json)))
        self.timeouts.append(timeout)

        if isinstance(self.fail_with, Exception):
            raise self.fail_with
        if isinstance(self.fail_with, int):
            return FakeResponse(self.fail_with, text='{"error": "boom"}')

        if method == "GET":
            return FakeResponse(200, copy.deepcopy(self.node(path)))
        if method == "PUT":
            self._set(path, copy.deepcopy(json))
            return FakeResponse(200, json)
        if method == "POST":
            key = f"-N{next(self._ids)}"
            self._set(f"{path}/{key}", copy.deepcopy(json))
            return FakeResponse(200, {"name": key})
        if method == "PATCH":
            current = self.node(path)
            merged = dict(current) if isinstance(current, dict) else {}
            merged.update(copy.deepcopy(json))
            self._set(path, merged)
            return FakeResponse(200, json)
        if method == "DELETE":
            self._delete(path)
            return FakeResponse(200, None)
        return FakeResponse(405, text='{"error": "method not allowed"}')

    def _set(self, path: str, value: Any) -> None:
        parts = [p for p in path.split("/") if p]
        if not parts:
            self.tree = value if isinstance(value, dict) else {}
            return
        cur = self.tree
        for part in parts[:-1]:
            # the database keeps arrays as objects keyed "0", "1", ...
            child = _as_dict(cur.get(part))
            cur[part] = child if isinstance(child, dict) else {}
            cur = cur[part]
        cur[parts[-1]] = value

    def _delete(self, path: str) -> None:
        parts = [p for p in path.split("/") if p]
        parent = self.node("/".join(parts[:-1])) if len(parts) > 1 else self.tree
        if isinstance(parent, dict):
            parent.pop(parts[-1], None)


def _as_dict(value: Any) -> Any:
    if isinstance(value, list):
        return {str(i): v for i, v in enumerate(value) if v is not None}
    return value


def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("network unreachable")
