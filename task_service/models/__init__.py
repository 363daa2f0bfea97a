"""Domain and database models for Task Service."""
from .domain import Task, TaskFilter, TaskPatch, TaskPriority, TaskStatus

__all__ = ["Task", "TaskFilter", "TaskPatch", "TaskPriority", "TaskStatus"]
