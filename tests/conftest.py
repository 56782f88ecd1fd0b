import os
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")
os.environ.setdefault("SEED_ON_STARTUP", "false")

from task_api.main import create_app  # noqa: E402
from task_api.repositories import InMemoryRepository  # noqa: E402
from task_api.service import TaskService  # noqa: E402
from task_api.settings import Settings  # noqa: E402


class FakeClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start=None):
        self.now = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def repo():
    return InMemoryRepository()


@pytest.fixture()
def service(repo, clock):
    return TaskService(repo, clock=clock)


@pytest.fixture()
def client(repo):
    app = create_app(Settings(seed_on_startup=False), repository=repo)
    with TestClient(app) as test_client:
        yield test_client
