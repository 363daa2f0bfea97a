"""
Error taxonomy for Task Service.

The HTTP layer maps these to status codes; nothing below the routers knows
about HTTP.
"""


class TaskServiceError(Exception):
    """Base class for task service errors"""


class TaskNotFound(TaskServiceError):
    """Referenced task id does not exist"""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"task {task_id} not found")


class ValidationFailed(TaskServiceError):
    """A structural or semantic rule was violated"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class StorageError(TaskServiceError):
    """Opaque failure raised by a storage backend"""
