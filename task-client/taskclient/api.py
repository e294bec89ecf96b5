"""Thin httpx wrapper over the task service's JSON API."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

import httpx

log = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000/api"


@dataclass
class Task:
    id: str
    title: str
    description: str
    status: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_json(cls, data: dict) -> "Task":
        created = data.get("createdAt")
        return cls(
            id=data["id"],
            title=data["title"],
            description=data.get("description") or "",
            status=data.get("status", "Pending"),
            created_at=datetime.fromisoformat(created.replace("Z", "+00:00")) if created else None,
        )


class TaskApiError(Exception):
    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or "Request failed")
        self.server_message = message
        self.status_code = status_code


class TaskApi:
    def __init__(self, base_url: str = DEFAULT_API_URL, client: Optional[httpx.Client] = None):
        self._client = client or httpx.Client(base_url=base_url.rstrip("/") + "/")
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, path: str, **kwargs):
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            log.error("%s %s failed: %s", method, path, exc)
            raise TaskApiError() from exc
        if response.is_error:
            try:
                message = response.json().get("message")
            except ValueError:
                message = None
            log.warning("%s %s -> %s %s", method, path, response.status_code, message)
            raise TaskApiError(message, response.status_code)
        return response.json()

    def health(self) -> dict:
        return self._request("GET", "health")

    def list_tasks(self) -> List[Task]:
        return [Task.from_json(item) for item in self._request("GET", "tasks")]

    def create_task(self, title: str, description: str = "") -> Task:
        return Task.from_json(self._request("POST", "tasks", json={"title": title, "description": description}))

    def update_task(self, task_id: str, **fields) -> Task:
        return Task.from_json(self._request("PUT", f"tasks/{task_id}", json=fields))

    def delete_task(self, task_id: str) -> str:
        return self._request("DELETE", f"tasks/{task_id}")["message"]
