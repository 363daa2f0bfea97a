# tests/test_status.py

from __future__ import annotations

from datetime import timedelta

import pytest

from task_service.models.domain import TaskStatus
from task_service.services.status import resolve_status

from .fakes import T0

PAST = T0 - timedelta(minutes=1)
FUTURE = T0 + timedelta(minutes=1)


@pytest.mark.parametrize(
    "is_completed, deadline, expected",
    [
        (False, None, TaskStatus.ACTIVE),
        (False, FUTURE, TaskStatus.ACTIVE),
        (False, PAST, TaskStatus.OVERDUE),
        (True, None, TaskStatus.COMPLETED),
        (True, FUTURE, TaskStatus.COMPLETED),
        (True, PAST, TaskStatus.LATE),
    ],
)
def test_resolve_status(is_completed, deadline, expected) -> None:
    assert resolve_status(is_completed, deadline, T0) == expected


def test_deadline_exactly_now_is_not_missed() -> None:
    assert resolve_status(False, T0, T0) == TaskStatus.ACTIVE
    assert resolve_status(True, T0, T0) == TaskStatus.COMPLETED


def test_naive_deadline_is_treated_as_utc() -> None:
    naive_past = PAST.replace(tzinfo=None)
    assert resolve_status(False, naive_past, T0) == TaskStatus.OVERDUE
