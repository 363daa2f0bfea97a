from sqlalchemy import Boolean, Column, DateTime, String, Text
from ..core.database import Base
from ..utils.datetime_utils import convert_datetime_to_utc
from .domain import Task, TaskPriority, TaskStatus


class TaskRecord(Base):
    """Task model for database"""
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Derived status snapshot and priority as strings
    status = Column(
        String(20),
        default=TaskStatus.ACTIVE.value,
        nullable=False,
        index=True
    )
    priority = Column(
        String(20),
        default=TaskPriority.MEDIUM.value,
        nullable=False,
        index=True
    )
    is_completed = Column(Boolean, default=False, nullable=False)

    # Timestamps are always written in UTC
    deadline = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    @classmethod
    def from_domain(cls, task: Task) -> "TaskRecord":
        record = cls(id=task.id, created_at=convert_datetime_to_utc(task.created_at))
        record.apply(task)
        return record

    def apply(self, task: Task) -> None:
        """Copy the mutable fields of a domain task onto this row"""
        self.title = task.title
        self.description = task.description
        self.status = TaskStatus(task.status).value
        self.priority = TaskPriority(task.priority).value
        self.is_completed = bool(task.is_completed)
        self.deadline = convert_datetime_to_utc(task.deadline)
        self.updated_at = convert_datetime_to_utc(task.updated_at)

    def to_domain(self) -> Task:
        # Some backends (SQLite) drop tzinfo on read; values are stored as UTC.
        return Task(
            id=self.id,
            title=self.title,
            description=self.description,
            deadline=convert_datetime_to_utc(self.deadline),
            status=TaskStatus(self.status),
            priority=TaskPriority(self.priority),
            is_completed=bool(self.is_completed),
            created_at=convert_datetime_to_utc(self.created_at),
            updated_at=convert_datetime_to_utc(self.updated_at),
        )

    def to_dict(self) -> dict:
        """Convert task to dictionary with proper datetime handling"""
        return self.to_domain().to_dict()

    def __repr__(self):
        return f"<TaskRecord(id={self.id}, title='{self.title}', status='{self.status}')>"
