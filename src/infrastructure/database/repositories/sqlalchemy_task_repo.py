"""SQLAlchemy implementation of Task repository."""

from datetime import datetime

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.exceptions import PersistenceError
from domain.entities.task import TaskRecord
from infrastructure.database.models import TaskModel

logger = structlog.get_logger()


class SQLAlchemyTaskRepository:
    """SQLAlchemy implementation of ITaskRepository.

    Every call runs in its own session and commits before returning.
    """

    def __init__(self, session_factory: sessionmaker[Session], namespace: str) -> None:
        self._session_factory = session_factory
        self._namespace = namespace

    @property
    def namespace(self) -> str:
        return self._namespace

    def load_all(self) -> list[TaskRecord]:
        """Get all records of the namespace ordered by order."""
        stmt = (
            select(TaskModel)
            .where(TaskModel.namespace == self._namespace)
            .order_by(TaskModel.order_index, TaskModel.created_at)
        )
        try:
            with self._session_factory() as session:
                models = list(session.execute(stmt).scalars())
        except SQLAlchemyError as exc:
            raise PersistenceError("load", cause=exc) from exc
        return [self._to_record(model) for model in models]

    def save(self, task_id: str, record: TaskRecord) -> None:
        """Insert or update a record."""
        stmt = select(TaskModel).where(
            TaskModel.namespace == self._namespace,
            TaskModel.id == task_id,
        )
        try:
            with self._session_factory() as session, session.begin():
                model = session.execute(stmt).scalar_one_or_none()
                if model is None:
                    session.add(self._to_model(task_id, record))
                else:
                    model.title = record.title
                    model.completed = record.completed
                    model.order_index = record.order
                    model.updated_at = datetime.utcnow()
        except SQLAlchemyError as exc:
            raise PersistenceError("save", task_id=task_id, cause=exc) from exc
        logger.debug("task_record_saved", namespace=self._namespace, task_id=task_id)

    def delete(self, task_id: str) -> bool:
        """Delete a record and return whether a row was removed."""
        stmt = delete(TaskModel).where(
            TaskModel.namespace == self._namespace,
            TaskModel.id == task_id,
        )
        try:
            with self._session_factory() as session, session.begin():
                result = session.execute(stmt)
        except SQLAlchemyError as exc:
            raise PersistenceError("delete", task_id=task_id, cause=exc) from exc
        return bool(result.rowcount)

    def _to_record(self, model: TaskModel) -> TaskRecord:
        """Convert ORM model to record."""
        return TaskRecord(
            id=model.id,
            title=model.title,
            completed=model.completed,
            order=model.order_index,
        )

    def _to_model(self, task_id: str, record: TaskRecord) -> TaskModel:
        """Convert record to ORM model."""
        return TaskModel(
            namespace=self._namespace,
            id=task_id,
            title=record.title,
            completed=record.completed,
            order_index=record.order,
        )
