from datetime import datetime
from typing import Optional

from ..models.domain import TaskStatus
from ..utils.datetime_utils import convert_datetime_to_utc


def resolve_status(is_completed: bool, deadline: Optional[datetime], now: datetime) -> TaskStatus:
    """Status implied by the completion flag and whether the deadline has passed"""
    missed = deadline is not None and convert_datetime_to_utc(deadline) < now
    if is_completed:
        return TaskStatus.LATE if missed else TaskStatus.COMPLETED
    return TaskStatus.OVERDUE if missed else TaskStatus.ACTIVE
