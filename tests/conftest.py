# tests/conftest.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from task_service.core.database import create_db_engine, init_db
from task_service.main import create_app
from task_service.repositories.sqlalchemy_repository import SqlAlchemyTaskRepository
from task_service.services.lifecycle import TaskService

from .fakes import T0, FakeClock, FakePublisher, FlakyTaskRepository


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(T0)


@pytest.fixture()
def repository() -> FlakyTaskRepository:
    return FlakyTaskRepository()


@pytest.fixture()
def publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture()
def service(repository: FlakyTaskRepository, clock: FakeClock, publisher: FakePublisher) -> TaskService:
    return TaskService(repository, clock=clock, publisher=publisher)


@pytest.fixture()
def db_engine():
    """
    In-memory SQLite engine with the schema created.

    Every session shares the single pinned connection, so data written by one
    repository call is visible to the next.
    """
    engine = create_db_engine("sqlite://")
    assert init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def sql_repository(db_engine) -> SqlAlchemyTaskRepository:
    factory = sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)
    return SqlAlchemyTaskRepository(factory)


@pytest.fixture()
def client(sql_repository: SqlAlchemyTaskRepository, clock: FakeClock) -> TestClient:
    app = create_app(TaskService(sql_repository, clock=clock), sweep_enabled=False)
    return TestClient(app)
