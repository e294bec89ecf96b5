# tests/test_smoke.py
import os
import uuid

import httpx
import pytest

BASE = os.getenv("TASKS_SMOKE_BASE")  # e.g. "http://localhost:5000/api" against a running deployment

pytestmark = pytest.mark.skipif(not BASE, reason="TASKS_SMOKE_BASE not set")


def test_smoke_happy_path():
    assert httpx.get(f"{BASE}/health").status_code == 200

    # Random suffix avoids colliding with tasks left by earlier runs
    title = f"Buy milk {uuid.uuid4().hex[:6]}"
    t = httpx.post(f"{BASE}/tasks", json={"title": f"  {title}  ", "description": "2% organic"})
    assert t.status_code == 201
    assert t.json()["title"] == title
    assert t.json()["status"] == "Pending"
    task_id = t.json()["id"]

    lst = httpx.get(f"{BASE}/tasks")
    assert lst.status_code == 200
    assert [x["id"] for x in lst.json()].count(task_id) == 1

    upd = httpx.put(f"{BASE}/tasks/{task_id}", json={"status": "Completed"})
    assert upd.status_code == 200
    assert upd.json()["status"] == "Completed"
    assert upd.json()["title"] == title

    bad = httpx.put(f"{BASE}/tasks/{task_id}", json={"status": "done"})
    assert bad.status_code == 400

    d = httpx.delete(f"{BASE}/tasks/{task_id}")
    assert d.status_code == 200
    assert d.json() == {"message": "Task deleted successfully"}

    assert httpx.delete(f"{BASE}/tasks/{task_id}").status_code == 404
    assert all(x["id"] != task_id for x in httpx.get(f"{BASE}/tasks").json())
