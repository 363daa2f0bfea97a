import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..core.database import SessionLocal, session_scope
from ..core.exceptions import StorageError, TaskNotFound
from ..models.domain import Task
from ..models.task import TaskRecord

logger = logging.getLogger(__name__)


class SqlAlchemyTaskRepository:
    """
    Task storage on top of SQLAlchemy.

    Every call runs in its own session, so one repository can be shared by
    request handlers and the overdue sweep thread.
    """

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self._session_factory = session_factory

    @property
    def bind(self):
        """Engine the sessions are bound to"""
        return self._session_factory.kw.get("bind")

    def create(self, task: Task) -> None:
        try:
            with session_scope(self._session_factory) as db:
                db.add(TaskRecord.from_domain(task))
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Error creating task: {e}") from e
        logger.debug(f"Task stored id={task.id}")

    def update(self, task: Task) -> None:
        try:
            with session_scope(self._session_factory) as db:
                record = db.get(TaskRecord, task.id)
                if record is None:
                    raise TaskNotFound(task.id)
                record.apply(task)
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Error updating task: {e}") from e

    def delete(self, task_id: str) -> None:
        try:
            with session_scope(self._session_factory) as db:
                record = db.get(TaskRecord, task_id)
                if record is None:
                    raise TaskNotFound(task_id)
                db.delete(record)
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Error deleting task: {e}") from e

    def find_by_id(self, task_id: str) -> Task:
        try:
            with session_scope(self._session_factory) as db:
                record = db.get(TaskRecord, task_id)
                if record is None:
                    raise TaskNotFound(task_id)
                return record.to_domain()
        except SQLAlchemyError as e:
            raise StorageError(f"Error loading task: {e}") from e

    def find_all(self) -> List[Task]:
        try:
            with session_scope(self._session_factory) as db:
                records = db.query(TaskRecord).order_by(TaskRecord.created_at).all()
                return [record.to_domain() for record in records]
        except SQLAlchemyError as e:
            raise StorageError(f"Error loading tasks: {e}") from e
