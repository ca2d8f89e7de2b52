# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from codetasks.app import create_app
from codetasks.models.task_model import CurrentUser, Role
from codetasks.services.task_service import TaskService

from .fakes import FakeFileStore, FakeTaskStore, StepClock


@pytest.fixture()
def store() -> FakeTaskStore:
    return FakeTaskStore()


@pytest.fixture()
def file_store() -> FakeFileStore:
    return FakeFileStore()


@pytest.fixture()
def clock() -> StepClock:
    return StepClock(datetime(2024, 3, 1, 10, 0, 0, tzinfo=timezone.utc), timedelta(seconds=1))


@pytest.fixture()
def service(store, file_store, clock) -> TaskService:
    return TaskService(store, file_store, clock=clock)


@pytest.fixture()
def staff() -> CurrentUser:
    return CurrentUser(id="u1", username="alice", role=Role.STAFF)


@pytest.fixture()
def other_staff() -> CurrentUser:
    return CurrentUser(id="u2", username="bob", role=Role.STAFF)


@pytest.fixture()
def auditor() -> CurrentUser:
    return CurrentUser(id="a1", username="carol", role=Role.AUDITOR)


@pytest.fixture()
def plain_user() -> CurrentUser:
    return CurrentUser(id="u3", username="dave", role=Role.USER)


@pytest.fixture()
def task_data():
    def make(title="Two Sum", **overrides):
        data = {
            "title": title,
            "description": "Return indices of the two numbers adding up to target.",
            "level": 2,
            "tags": ["array", "hash-map"],
            "hint": "Use a dict",
            "testcases": [
                {"input": "[2,7,11,15] 9", "output": "[0,1]", "published": True},
                {"input": "[3,3] 6", "output": "[0,1]", "published": False},
            ],
            "solution_code": "def solve(nums, target): ...",
            "files": [{"key": "tasks/two-sum/a.png", "url": "https://cdn.example/a.png"}],
        }
        data.update(overrides)
        return data

    return make


@pytest.fixture()
def app(service):
    """
    Flask app wired to the in-memory service.

    The Mongo client is created lazily and never used: routes pick the
    service up from app.extensions.
    """
    app = create_app(
        {
            "TESTING": True,
            "JWT_SECRET_KEY": "test-secret-key-with-enough-length-123",
            "AWS_S3_BUCKET": "",
        }
    )
    app.extensions["task_service"] = service
    return app


@pytest.fixture()
def client(app):
    return app.test_client()
