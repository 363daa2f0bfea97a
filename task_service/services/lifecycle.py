"""
Task lifecycle service.

Orchestrates create, update, delete, get, completion toggle and listing on top
of a storage collaborator. Every read-check-write sequence for one task id runs
under a per-id lock held by the service.
"""
import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from ..models.domain import Task, TaskFilter, TaskPatch, TaskPriority, TaskStatus
from ..repositories.base import TaskRepository
from ..utils.datetime_utils import convert_datetime_to_utc, utcnow
from .macro_parser import parse_task_macros
from .query import query_tasks
from .status import resolve_status
from .sweep import sweep_overdue
from .validation import validate_task

logger = logging.getLogger(__name__)


class _TaskLock:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class TaskService:
    """Business operations on tasks"""

    def __init__(
        self,
        repository: TaskRepository,
        clock: Optional[Callable[[], datetime]] = None,
        publisher=None,
    ):
        self.repository = repository
        self.clock = clock or utcnow
        self.publisher = publisher
        self._locks: Dict[str, _TaskLock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _task_lock(self, task_id: str) -> Iterator[None]:
        # Entries live only while someone holds or waits on them
        with self._locks_guard:
            entry = self._locks.get(task_id)
            if entry is None:
                entry = self._locks[task_id] = _TaskLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._locks_guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[task_id]

    def _publish(self, event_type: str, task: Task) -> None:
        if self.publisher is None:
            return
        try:
            self.publisher.publish_event(event_type, task.to_dict())
        except Exception as e:
            # Don't fail the operation if event publishing fails
            logger.warning(f"Failed to publish {event_type} event: {e}")

    def create_task(
        self,
        title: str,
        description: Optional[str] = None,
        deadline: Optional[datetime] = None,
        priority: Optional[str] = None,
    ) -> Task:
        """
        Create a task from client input.

        Macros in the title fill priority and deadline only when the caller
        left them unset.

        Raises:
            ValidationFailed: the task breaks a validation rule
            StorageError: the task could not be stored
        """
        now = self.clock()
        macros = parse_task_macros(title)

        if not priority and macros.priority is not None:
            priority = macros.priority
        if deadline is None and macros.deadline is not None:
            deadline = macros.deadline

        task = Task(
            id=str(uuid.uuid4()),
            title=macros.title,
            description=description,
            deadline=convert_datetime_to_utc(deadline),
            status=TaskStatus.ACTIVE,
            priority=priority or TaskPriority.MEDIUM,
            is_completed=False,
            created_at=now,
        )

        validate_task(task, now=now)
        task.priority = TaskPriority(task.priority)

        self.repository.create(task)
        logger.info(f"Task created id={task.id} priority={task.priority.value}")
        self._publish("task_created", task)
        return task

    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        """
        Apply a partial update and recompute the status.

        Raises:
            TaskNotFound: no task with this id
            ValidationFailed: the updated task breaks a validation rule
            StorageError: the task could not be stored
        """
        with self._task_lock(task_id):
            existing = self.repository.find_by_id(task_id)
            now = self.clock()

            # Patched fields win over macros, macros win over stored values
            macros = parse_task_macros(patch.title if patch.title is not None else existing.title)
            priority = patch.priority or macros.priority or existing.priority
            deadline = convert_datetime_to_utc(patch.deadline) or macros.deadline or existing.deadline

            task = replace(
                existing,
                title=macros.title,
                description=patch.description if patch.description is not None else existing.description,
                deadline=deadline,
                priority=priority,
            )

            validate_task(task, now=now)
            task.priority = TaskPriority(task.priority)
            task.status = resolve_status(task.is_completed, task.deadline, now)
            task.updated_at = now

            self.repository.update(task)
            logger.info(f"Task updated id={task.id} status={task.status.value}")
            return task

    def delete_task(self, task_id: str) -> None:
        """
        Raises:
            TaskNotFound: no task with this id
            StorageError: the task exists but could not be removed
        """
        with self._task_lock(task_id):
            self.repository.find_by_id(task_id)
            self.repository.delete(task_id)
        logger.info(f"Task deleted id={task_id}")

    def get_task(self, task_id: str) -> Task:
        return self.repository.find_by_id(task_id)

    def set_completion(self, task_id: str, is_completed: bool) -> Task:
        """
        Set the completion flag and recompute the status.

        Raises:
            TaskNotFound: no task with this id
            StorageError: the task could not be stored
        """
        with self._task_lock(task_id):
            task = self.repository.find_by_id(task_id)
            now = self.clock()

            task.is_completed = bool(is_completed)
            task.status = resolve_status(task.is_completed, task.deadline, now)
            task.updated_at = now

            self.repository.update(task)
            logger.info(f"Task completion set id={task.id} status={task.status.value}")

        if task.is_completed:
            self._publish("task_completed", task)
        return task

    def list_tasks(self, task_filter: TaskFilter) -> Tuple[List[Task], int]:
        """Filtered, sorted page of tasks and the number of matching tasks"""
        return query_tasks(self.repository.find_all(), task_filter)

    def sweep_overdue(self) -> int:
        """Entry point for the periodic scheduler"""
        return sweep_overdue(self.repository, now=self.clock(), publisher=self.publisher)
