from __future__ import annotations
import logging
import requests
from typing import Any, Dict, Optional
from core.exceptions import FirebaseError

logger = logging.getLogger(__name__)


class FirebaseClient:
    """Thin REST client for a Firebase Realtime Database (no auth)."""
    def __init__(self, base_url: str, timeout: float = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _url(self, path: str) -> str:
        path = path.strip("/")
        return f"{self.base_url}/{path}.json" if path else f"{self.base_url}/.json"

    def _request(self, method: str, path: str, data: Any = None) -> Any:
        url = self._url(path)
        logger.debug("%s %s", method, url)
        try:
            if data is None:
                r = self.session.request(method, url, timeout=self.timeout)
            else:
                r = self.session.request(method, url, json=data, timeout=self.timeout)
        except requests.RequestException as e:
            raise FirebaseError(f"{method} {path} failed: {e}") from e
        if not r.ok:
            raise FirebaseError(f"{method} {path} failed: {r.status_code} {r.text}", r.status_code)
        if not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise FirebaseError(f"{method} {path}: invalid JSON in response", r.status_code) from e

    # ---------- generic ----------
    def get_data(self, path: str = "") -> Any:
        return self._request("GET", path)

    def put_data(self, path: str, data: Any) -> Any:
        return self._request("PUT", path, data)

    def post_data(self, path: str, data: Any) -> Dict[str, Any]:
        return self._request("POST", path, data) or {}

    def patch_data(self, path: str, data: Dict[str, Any]) -> Any:
        return self._request("PATCH", path, data)

    def delete_data(self, path: str) -> None:
        self._request("DELETE", path)

    def fetch_root(self) -> Dict[str, Any]:
        return self.get_data("") or {}

    # ---------- contacts ----------
    def fetch_contacts(self) -> Dict[str, Dict[str, Any]]:
        return self.get_data("contacts") or {}

    def fetch_contact(self, contact_id: str) -> Dict[str, Any]:
        data = self.get_data(f"contacts/{contact_id}")
        if data is None:
            raise FirebaseError(f"Contact {contact_id} not found", 404)
        return data

    def create_contact(self, data: Dict[str, Any]) -> str:
        """POST a new contact and return the id the store generated."""
        new_id = self.post_data("contacts", data).get("name")
        if not new_id:
            raise FirebaseError("Missing id in create contact response")
        return new_id

    def update_contact(self, contact_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.put_data(f"contacts/{contact_id}", data)

    def save_contact_color(self, contact_id: str, color: str) -> None:
        self.patch_data(f"contacts/{contact_id}", {"color": color})

    def delete_contact(self, contact_id: str) -> None:
        self.delete_data(f"contacts/{contact_id}")

    # ---------- tasks ----------
    def fetch_tasks(self) -> Dict[str, Dict[str, Any]]:
        return self.get_data("tasks") or {}

    def fetch_task(self, task_id: str) -> Dict[str, Any]:
        data = self.get_data(f"tasks/{task_id}")
        if data is None:
            raise FirebaseError(f"Task {task_id} not found", 404)
        return data

    def create_task(self, data: Dict[str, Any]) -> str:
        new_id = self.post_data("tasks", data).get("name")
        if not new_id:
            raise FirebaseError("Missing id in create task response")
        return new_id

    def update_task(self, task_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.put_data(f"tasks/{task_id}", data)

    def patch_task(self, task_id: str, **fields) -> Dict[str, Any]:
        return self.patch_data(f"tasks/{task_id}", fields)

    def patch_subtask(self, task_id: str, subtask_id: str, **fields) -> Dict[str, Any]:
        return self.patch_data(f"tasks/{task_id}/subtasks/{subtask_id}", fields)

    def delete_task(self, task_id: str) -> None:
        self.delete_data(f"tasks/{task_id}")

    # ---------- current user ----------
    def fetch_current_user(self) -> Dict[str, Any]:
        data = self.get_data("currentUser") or {}
        return {"name": data.get("name") or ""}

    def set_current_user(self, name: str) -> None:
        self.put_data("currentUser", {"name": name})
