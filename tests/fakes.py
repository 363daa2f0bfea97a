# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from task_service.core.exceptions import StorageError
from task_service.models.domain import Task
from task_service.repositories.memory import InMemoryTaskRepository

T0 = datetime(2030, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock injected into TaskService."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@dataclass
class PublishedEvent:
    event_type: str
    data: dict[str, Any]


@dataclass
class FakePublisher:
    """Captures published events; optionally blows up on publish."""

    events: list[PublishedEvent] = field(default_factory=list)
    fail: bool = False

    def publish_event(self, event_type: str, data: dict[str, Any]) -> bool:
        if self.fail:
            raise RuntimeError("broker unavailable")
        self.events.append(PublishedEvent(event_type=event_type, data=data))
        return True

    def types(self) -> list[str]:
        return [e.event_type for e in self.events]


class FlakyTaskRepository(InMemoryTaskRepository):
    """
    In-memory repository with failure injection.

    - update() raises StorageError for ids in fail_update_ids
    - find_all() raises StorageError when fail_find_all is set
    - create()/delete() raise StorageError when fail_writes is set
    """

    def __init__(self) -> None:
        super().__init__()
        self.fail_update_ids: set[str] = set()
        self.fail_find_all = False
        self.fail_writes = False
        self.updates: list[Task] = []

    def create(self, task: Task) -> None:
        if self.fail_writes:
            raise StorageError("disk full")
        super().create(task)

    def update(self, task: Task) -> None:
        if task.id in self.fail_update_ids:
            raise StorageError(f"cannot update {task.id}")
        super().update(task)
        self.updates.append(task)

    def delete(self, task_id: str) -> None:
        if self.fail_writes:
            raise StorageError("disk full")
        super().delete(task_id)

    def find_all(self) -> list[Task]:
        if self.fail_find_all:
            raise StorageError("connection lost")
        return super().find_all()


class FakeChannel:
    def __init__(self) -> None:
        self.published: list[dict[str, Any]] = []
        self.exchanges: list[str] = []

    def exchange_declare(self, exchange: str, exchange_type: str, durable: bool) -> None:
        self.exchanges.append(exchange)

    def basic_publish(self, exchange: str, routing_key: str, body: str, properties: Any) -> None:
        self.published.append({"exchange": exchange, "routing_key": routing_key, "body": body})


class FakeConnection:
    def __init__(self, channel: FakeChannel) -> None:
        self._channel = channel
        self.is_closed = False

    def channel(self) -> FakeChannel:
        return self._channel

    def close(self) -> None:
        self.is_closed = True
