"""Redis-backed task store.

Each task lives as a JSON document under ``task:<id>``. The sorted set
``tasks:by_created`` holds every id scored by its creation timestamp, so
listing newest-first is a single ZREVRANGE followed by an MGET. Documents
also carry a creation sequence number that breaks ties between tasks
created at the same clock reading.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

import redis

from taskservice.errors import NotFoundError, StoreError, ValidationError
from taskservice.models import DEFAULT_STATUS, STATUSES, Task

log = logging.getLogger(__name__)

INDEX_KEY = "tasks:by_created"
SEQUENCE_KEY = "tasks:sequence"
UPDATABLE_FIELDS = ("title", "description", "status")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def task_key(task_id: str) -> str:
    return f"task:{task_id}"


def normalize_id(task_id) -> str:
    try:
        return str(uuid.UUID(str(task_id)))
    except ValueError:
        raise NotFoundError("Invalid task ID") from None


class TaskStore:
    def __init__(self, client: redis.Redis, clock: Optional[Callable[[], datetime]] = None):
        self._redis = client
        self._clock = clock or utcnow

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "TaskStore":
        return cls(redis.Redis.from_url(url, decode_responses=True), **kwargs)

    def ping(self) -> None:
        try:
            self._redis.ping()
        except redis.RedisError as exc:
            raise StoreError(f"Redis connection failed: {exc}") from exc
        log.info("Task store connected")

    def close(self) -> None:
        self._redis.close()
        log.info("Task store closed")

    def create(self, title: str, description: Optional[str] = "") -> Task:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required")
        task_id = str(uuid.uuid4())
        created_at = self._clock()
        try:
            seq = self._redis.incr(SEQUENCE_KEY)
        except redis.RedisError as exc:
            raise StoreError(str(exc)) from exc
        doc = {
            "title": title,
            "description": (description or "").strip(),
            "status": DEFAULT_STATUS,
            "createdAt": created_at.isoformat(),
            "seq": seq,
        }
        try:
            with self._redis.pipeline(transaction=True) as p:
                p.set(task_key(task_id), json.dumps(doc))
                p.zadd(INDEX_KEY, {task_id: created_at.timestamp()})
                p.execute()
        except redis.RedisError as exc:
            raise StoreError(str(exc)) from exc
        log.debug("Created task %s", task_id)
        return _to_task(task_id, doc)

    def find_all(self) -> List[Task]:
        try:
            ids = self._redis.zrevrange(INDEX_KEY, 0, -1)
            if not ids:
                return []
            raw = self._redis.mget([task_key(task_id) for task_id in ids])
        except redis.RedisError as exc:
            raise StoreError(str(exc)) from exc
        # an id may outlive its document if a delete raced the snapshot
        docs = [json.loads(doc) if doc is not None else None for doc in raw]
        found = [(_to_task(task_id, doc), doc.get("seq", 0)) for task_id, doc in zip(ids, docs) if doc is not None]
        found.sort(key=lambda item: (item[0].createdAt, item[1]), reverse=True)
        return [task for task, _ in found]

    def update(self, task_id, fields: dict) -> Task:
        task_id = normalize_id(task_id)
        changes = _validate_changes(fields)
        key = task_key(task_id)
        try:
            raw = self._redis.get(key)
            if raw is None:
                raise NotFoundError("Task not found")
            doc = json.loads(raw)
            doc.update(changes)
            # xx: never resurrect a task deleted since the read
            if not self._redis.set(key, json.dumps(doc), xx=True):
                raise NotFoundError("Task not found")
        except redis.RedisError as exc:
            raise StoreError(str(exc)) from exc
        log.debug("Updated task %s fields=%s", task_id, sorted(changes))
        return _to_task(task_id, doc)

    def delete(self, task_id) -> Task:
        task_id = normalize_id(task_id)
        key = task_key(task_id)
        try:
            raw = self._redis.get(key)
            if raw is None:
                raise NotFoundError("Task not found")
            with self._redis.pipeline(transaction=True) as p:
                p.delete(key)
                p.zrem(INDEX_KEY, task_id)
                deleted, _ = p.execute()
        except redis.RedisError as exc:
            raise StoreError(str(exc)) from exc
        if not deleted:
            raise NotFoundError("Task not found")
        log.debug("Deleted task %s", task_id)
        return _to_task(task_id, json.loads(raw))


def _validate_changes(fields: dict) -> dict:
    changes = {}
    for name in UPDATABLE_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name == "status":
            if not isinstance(value, str) or value not in STATUSES:
                raise ValidationError("Invalid status value")
        elif value is None:
            continue
        else:
            value = str(value).strip()
            if name == "title" and not value:
                raise ValidationError("Title is required")
        changes[name] = value
    return changes


def _to_task(task_id: str, doc: dict) -> Task:
    return Task(
        id=task_id,
        title=doc["title"],
        description=doc.get("description", ""),
        status=doc.get("status", DEFAULT_STATUS),
        createdAt=doc["createdAt"],
    )
