from datetime import datetime
from typing import Optional

from ..core.exceptions import ValidationFailed
from ..models.domain import Task, TaskPriority, TaskStatus
from ..utils.datetime_utils import convert_datetime_to_utc, utcnow

MIN_TITLE_LENGTH = 4

TITLE_TOO_SHORT = "title too short"
DEADLINE_IN_PAST = "deadline in past"
INVALID_STATUS = "invalid status"
INVALID_PRIORITY = "invalid priority"


def is_valid_status(value) -> bool:
    try:
        TaskStatus(value)
    except ValueError:
        return False
    return True


def is_valid_priority(value) -> bool:
    try:
        TaskPriority(value)
    except ValueError:
        return False
    return True


def validate_task(task: Task, now: Optional[datetime] = None) -> None:
    """
    Check a task before it is persisted.

    Raises ValidationFailed with the reason of the first failing rule.
    """
    if len((task.title or "").strip()) < MIN_TITLE_LENGTH:
        raise ValidationFailed(TITLE_TOO_SHORT)

    if task.deadline is not None:
        now = now or utcnow()
        if convert_datetime_to_utc(task.deadline) < now:
            raise ValidationFailed(DEADLINE_IN_PAST)

    if not is_valid_status(task.status):
        raise ValidationFailed(INVALID_STATUS)

    if not is_valid_priority(task.priority):
        raise ValidationFailed(INVALID_PRIORITY)
