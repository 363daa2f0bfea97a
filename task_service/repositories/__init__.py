"""Storage backends for Task Service."""
from .base import TaskRepository
from .memory import InMemoryTaskRepository
from .sqlalchemy_repository import SqlAlchemyTaskRepository

__all__ = ["TaskRepository", "InMemoryTaskRepository", "SqlAlchemyTaskRepository"]
