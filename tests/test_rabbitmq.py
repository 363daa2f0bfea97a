# tests/test_rabbitmq.py

from __future__ import annotations

import json

import pika
import pika.exceptions
import pytest

from task_service.core import rabbitmq
from task_service.core.rabbitmq import TaskEventPublisher

from .fakes import FakeChannel, FakeConnection


@pytest.fixture()
def channel(monkeypatch: pytest.MonkeyPatch) -> FakeChannel:
    fake = FakeChannel()
    monkeypatch.setattr(rabbitmq.pika, "BlockingConnection", lambda params: FakeConnection(fake))
    return fake


def test_routing_key_for() -> None:
    assert TaskEventPublisher.routing_key_for("task_created") == "task.created"
    assert TaskEventPublisher.routing_key_for("task_overdue") == "task.overdue"


def test_publish_connects_lazily_and_sends_json(channel: FakeChannel) -> None:
    publisher = TaskEventPublisher(host="localhost")

    assert publisher.publish_event("task_created", {"id": "t-1"}) is True

    assert channel.exchanges == ["task_exchange"]
    sent = channel.published[0]
    assert sent["exchange"] == "task_exchange"
    assert sent["routing_key"] == "task.created"
    assert json.loads(sent["body"]) == {"event_type": "task_created", "data": {"id": "t-1"}}


def test_connect_gives_up_after_retries(monkeypatch: pytest.MonkeyPatch) -> None:
    attempts = []

    def refuse(params):
        attempts.append(params)
        raise pika.exceptions.AMQPConnectionError("refused")

    monkeypatch.setattr(rabbitmq.pika, "BlockingConnection", refuse)
    monkeypatch.setattr(rabbitmq.time, "sleep", lambda seconds: None)

    publisher = TaskEventPublisher(host="localhost")

    assert publisher.connect(max_retries=3, retry_delay=0) is False
    assert len(attempts) == 3
    assert publisher.publish_event("task_created", {}) is False


def test_close(channel: FakeChannel) -> None:
    publisher = TaskEventPublisher(host="localhost")
    assert publisher.connect()
    connection = publisher.connection

    publisher.close()

    assert connection.is_closed is True
    assert publisher.is_connected is False
    publisher.close()


def test_publish_reconnects_after_close(channel: FakeChannel) -> None:
    publisher = TaskEventPublisher(host="localhost")
    assert publisher.connect()
    publisher.close()

    assert publisher.publish_event("task_completed", {"id": "t-2"}) is True

    assert channel.exchanges == ["task_exchange", "task_exchange"]
    assert channel.published[0]["routing_key"] == "task.completed"


def test_publish_error_is_reported_not_raised(channel: FakeChannel, monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(**kwargs):
        raise pika.exceptions.ChannelClosed(406, "PRECONDITION_FAILED")

    monkeypatch.setattr(channel, "basic_publish", broken)
    publisher = TaskEventPublisher(host="localhost")

    assert publisher.publish_event("task_overdue", {"id": "t-3"}) is False


def test_encode() -> None:
    body = TaskEventPublisher.encode("task_overdue", {"id": "t-4", "status": "OVERDUE"})

    assert json.loads(body) == {"event_type": "task_overdue", "data": {"id": "t-4", "status": "OVERDUE"}}


def test_from_settings_uses_configured_broker() -> None:
    publisher = TaskEventPublisher.from_settings()
    assert isinstance(publisher.port, int)
    assert publisher.exchange == "task_exchange"
    assert pika.PlainCredentials(publisher.user, publisher.password).username == publisher.user
