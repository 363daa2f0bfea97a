from typing import List, Protocol

from ..models.domain import Task


class TaskRepository(Protocol):
    """
    Storage collaborator used by the lifecycle service and the overdue sweep.

    Implementations raise TaskNotFound for unknown ids and StorageError for
    backend failures. Each call is atomic for a single task; nothing spans
    several rows.
    """

    def create(self, task: Task) -> None:
        ...

    def update(self, task: Task) -> None:
        ...

    def delete(self, task_id: str) -> None:
        ...

    def find_by_id(self, task_id: str) -> Task:
        ...

    def find_all(self) -> List[Task]:
        ...
