# tests/conftest.py

import pytest
from fastapi.testclient import TestClient

from taskclient.api import TaskApi
from taskclient.board import TaskBoard
from taskservice.main import create_app
from taskservice.store import TaskStore

from .fakes import FakeRedis, SteppingClock


@pytest.fixture()
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def store(fake_redis: FakeRedis) -> TaskStore:
    return TaskStore(fake_redis, clock=SteppingClock())


@pytest.fixture()
def app(store: TaskStore):
    return create_app(store=store)


@pytest.fixture()
def client(app) -> TestClient:
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture()
def api(app) -> TaskApi:
    # TestClient is an httpx.Client, so the real client code talks to the app in-process
    with TestClient(app, base_url="http://testserver/api", raise_server_exceptions=False) as http:
        yield TaskApi(client=http)


@pytest.fixture()
def board(api: TaskApi) -> TaskBoard:
    return TaskBoard(api)
