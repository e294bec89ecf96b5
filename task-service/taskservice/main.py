import logging
import sys
from contextlib import asynccontextmanager
from typing import List, Optional
from uuid import UUID

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware

from taskservice.config import Settings, load_settings, setup_logging
from taskservice.errors import (
    ConfigError,
    StoreError,
    TaskError,
    ValidationError,
    register_exception_handlers,
)
from taskservice.models import HealthResponse, MessageResponse, Task, TaskCreate, TaskUpdate
from taskservice.store import TaskStore

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_store(request: Request) -> TaskStore:
    return request.app.state.store


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="OK", message="Server is running")


@router.post("/tasks", status_code=status.HTTP_201_CREATED, response_model=Task)
def create_task(task: Optional[TaskCreate] = None, store: TaskStore = Depends(get_store)):
    if task is None:
        raise ValidationError("Title is required")
    try:
        created = store.create(task.title, task.description)
    except StoreError as exc:
        raise TaskError(exc.message, status_code=status.HTTP_400_BAD_REQUEST) from exc
    log.info("Created task %s", created.id)
    return created


@router.get("/tasks", response_model=List[Task])
def list_tasks(store: TaskStore = Depends(get_store)):
    return store.find_all()


@router.put("/tasks/{task_id}", response_model=Task)
def update_task(task_id: UUID, updates: Optional[TaskUpdate] = None, store: TaskStore = Depends(get_store)):
    changes = updates.changes() if updates is not None else {}
    try:
        updated = store.update(task_id, changes)
    except StoreError as exc:
        raise TaskError(exc.message, status_code=status.HTTP_400_BAD_REQUEST) from exc
    log.info("Updated task %s", updated.id)
    return updated


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
def delete_task(task_id: UUID, store: TaskStore = Depends(get_store)):
    deleted = store.delete(task_id)
    log.info("Deleted task %s", deleted.id)
    return MessageResponse(message="Task deleted successfully")


def create_app(store: Optional[TaskStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    if store is None and settings is None:
        raise ConfigError("create_app needs either a store or settings")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.store is None
        if owned:
            app.state.store = TaskStore.from_url(settings.redis_url)
        app.state.store.ping()
        try:
            yield
        finally:
            if owned:
                app.state.store.close()
                app.state.store = None

    app = FastAPI(title="Task Manager", lifespan=lifespan)
    app.state.store = store
    origins = settings.cors_origins if settings is not None else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    register_exception_handlers(app)
    return app


def run() -> None:
    try:
        settings = load_settings()
    except ConfigError as exc:
        setup_logging()
        log.error("Configuration error: %s", exc)
        sys.exit(1)
    setup_logging(settings.log_level)
    app = create_app(settings=settings)
    log.info("Server running on http://%s:%s (API at /api/tasks)", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
