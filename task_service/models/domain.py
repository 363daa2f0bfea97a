"""
Domain objects for Task Service.

These are plain dataclasses shared by the services, repositories and routers;
the database row lives in ``models.task``.
"""
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union


class TaskStatus(str, enum.Enum):
    """Task status enumeration"""
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"
    LATE = "LATE"


class TaskPriority(str, enum.Enum):
    """Task priority enumeration"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


@dataclass
class Task:
    """
    A task as seen by the core.

    ``status`` and ``priority`` may briefly hold raw strings coming from a
    client; the validator rejects anything outside the enumerations.
    """
    id: str
    title: str
    created_at: datetime
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    status: Union[TaskStatus, str] = TaskStatus.ACTIVE
    priority: Union[TaskPriority, str] = TaskPriority.MEDIUM
    is_completed: bool = False
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "status": _enum_value(self.status),
            "priority": _enum_value(self.priority),
            "is_completed": self.is_completed,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class TaskFilter:
    """Listing parameters; empty strings mean "not set"."""
    status: str = ""
    priority: str = ""
    sort_by: str = ""
    sort_order: str = ""
    page: int = 1
    page_size: int = 10


@dataclass
class TaskPatch:
    """Partial update; None means the client did not supply the field."""
    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    priority: Optional[str] = None


def _enum_value(value):
    return value.value if isinstance(value, enum.Enum) else value
