"""
Overdue sweep.

A batch pass that promotes ACTIVE tasks whose deadline has passed to OVERDUE,
plus a small asyncio loop that runs it on a fixed interval.

Only the ACTIVE -> OVERDUE transition is swept. COMPLETED -> LATE is left to
the completion toggle and to updates.
"""
import asyncio
import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..models.domain import TaskStatus
from ..repositories.base import TaskRepository
from ..utils.datetime_utils import convert_datetime_to_utc, utcnow

logger = logging.getLogger(__name__)


def sweep_overdue(
    repository: TaskRepository,
    now: Optional[datetime] = None,
    publisher=None,
) -> int:
    """
    Mark stale ACTIVE tasks as OVERDUE.

    Best-effort: a failing task is logged and skipped, and the sweep itself
    never raises.

    Returns:
        int: number of tasks moved to OVERDUE
    """
    now = convert_datetime_to_utc(now) or utcnow()

    try:
        tasks = repository.find_all()
    except Exception:
        logger.exception("Overdue sweep could not load tasks")
        return 0

    changed = 0
    for task in tasks:
        if task.is_completed or task.deadline is None:
            continue
        if task.status != TaskStatus.ACTIVE or not convert_datetime_to_utc(task.deadline) < now:
            continue

        overdue = replace(task, status=TaskStatus.OVERDUE, updated_at=now)
        try:
            repository.update(overdue)
        except Exception as e:
            logger.error(f"Failed to update task {task.id} to OVERDUE: {e}")
            continue

        changed += 1
        logger.info(f"Task {task.id} marked as OVERDUE")

        if publisher is not None:
            try:
                publisher.publish_event("task_overdue", overdue.to_dict())
            except Exception as e:
                logger.warning(f"Failed to publish task_overdue event: {e}")

    return changed


async def run_overdue_sweeper(service, interval_seconds: float = 60.0) -> None:
    """
    Run service.sweep_overdue() every interval_seconds until cancelled.

    The sweep touches storage synchronously, so it runs in a worker thread.
    """
    sleep_s = max(1.0, float(interval_seconds))
    logger.info(f"Overdue sweeper started interval={sleep_s}s")

    while True:
        try:
            changed = await asyncio.to_thread(service.sweep_overdue)
            if changed:
                logger.info(f"Overdue sweep completed, {changed} task(s) updated")
            else:
                logger.debug("Overdue sweep completed, nothing to update")
        except Exception:
            logger.exception("Overdue sweep failed")

        await asyncio.sleep(sleep_s)
