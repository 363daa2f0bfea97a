import threading
from dataclasses import replace
from typing import Dict, List

from ..core.exceptions import StorageError, TaskNotFound
from ..models.domain import Task


class InMemoryTaskRepository:
    """
    Dict-backed task storage.

    Keeps insertion order and hands out copies, so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}
        self._lock = threading.Lock()

    def create(self, task: Task) -> None:
        with self._lock:
            if task.id in self._tasks:
                raise StorageError(f"task {task.id} already exists")
            self._tasks[task.id] = replace(task)

    def update(self, task: Task) -> None:
        with self._lock:
            if task.id not in self._tasks:
                raise TaskNotFound(task.id)
            self._tasks[task.id] = replace(task)

    def delete(self, task_id: str) -> None:
        with self._lock:
            if task_id not in self._tasks:
                raise TaskNotFound(task_id)
            del self._tasks[task_id]

    def find_by_id(self, task_id: str) -> Task:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise TaskNotFound(task_id)
            return replace(task)

    def find_all(self) -> List[Task]:
        with self._lock:
            return [replace(task) for task in self._tasks.values()]
