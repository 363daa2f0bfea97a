"""
Filtering, sorting and pagination over an in-memory task collection.
"""
import math
from datetime import datetime, timezone
from typing import Callable, Dict, List, Sequence, Tuple

from ..core.exceptions import ValidationFailed
from ..models.domain import Task, TaskFilter, TaskPriority

PRIORITY_RANK = {
    TaskPriority.CRITICAL: 4,
    TaskPriority.HIGH: 3,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 1,
}

SORT_ORDERS = ("", "asc", "desc")

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def _deadline_key(task: Task):
    # A missing deadline compares greater than any date.
    return (task.deadline is None, task.deadline or _EARLIEST)


def _created_at_key(task: Task):
    return task.created_at


def _priority_key(task: Task):
    return PRIORITY_RANK.get(task.priority, 0)


SORT_KEYS: Dict[str, Callable[[Task], object]] = {
    "deadline": _deadline_key,
    "created_at": _created_at_key,
    "priority": _priority_key,
}


def _matches(task: Task, task_filter: TaskFilter) -> bool:
    if task_filter.status and task.status != task_filter.status:
        return False
    if task_filter.priority and task.priority != task_filter.priority:
        return False
    return True


def query_tasks(tasks: Sequence[Task], task_filter: TaskFilter) -> Tuple[List[Task], int]:
    """
    Apply a TaskFilter to a task collection.

    Returns:
        tuple: (page of tasks, number of tasks matching the filter)

    Raises:
        ValidationFailed: on the first invalid listing parameter
    """
    if task_filter.page <= 0:
        raise ValidationFailed("page must be greater than 0")
    if task_filter.page_size <= 0:
        raise ValidationFailed("page_size must be greater than 0")

    sort_by = task_filter.sort_by or ""
    sort_order = (task_filter.sort_order or "").lower()

    if sort_by and sort_by not in SORT_KEYS:
        raise ValidationFailed("invalid sort_by field")
    if sort_order not in SORT_ORDERS:
        raise ValidationFailed("invalid sort_order value")

    filtered = [task for task in tasks if _matches(task, task_filter)]

    # sorted() is stable in both directions, so ties keep their input order.
    if sort_by:
        filtered = sorted(filtered, key=SORT_KEYS[sort_by], reverse=sort_order == "desc")

    total = len(filtered)
    start = min(max((task_filter.page - 1) * task_filter.page_size, 0), total)
    end = min(start + task_filter.page_size, total)
    return filtered[start:end], total


def total_pages(total: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(total / page_size)
