"""Task domain entity."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog
from pydantic import BaseModel, ConfigDict, Field

from core.exceptions import InvalidAttributeError, PersistenceError, TaskDestroyedError
from domain.events import (
    AttributeChanged,
    EventBus,
    PersistenceFailed,
    TaskChanged,
    TaskDestroyed,
    VisibilityRequested,
)

if TYPE_CHECKING:
    from domain.repositories.task_repository import ITaskRepository

logger = structlog.get_logger()

# id and order are fixed at creation
MUTABLE_ATTRIBUTES = frozenset({"title", "completed"})


class TaskRecord(BaseModel):
    """Persisted shape of a task."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str
    completed: bool = False
    order: int = Field(..., ge=1)


def new_task_id() -> str:
    return uuid4().hex


@dataclass(eq=False)
class Task:
    """Domain entity for a task.

    Mutations go through ``save()``, which writes the full record through the
    bound repository before notifying observers on ``events``.
    """

    title: str
    order: int
    completed: bool = False
    id: str = field(default_factory=new_task_id)
    events: EventBus = field(default_factory=EventBus, repr=False)
    _repository: "ITaskRepository | None" = field(default=None, init=False, repr=False)
    _destroyed: bool = field(default=False, init=False, repr=False)

    @classmethod
    def from_record(cls, record: TaskRecord) -> "Task":
        return cls(
            id=record.id,
            title=record.title,
            completed=record.completed,
            order=record.order,
        )

    def to_record(self) -> TaskRecord:
        return TaskRecord(
            id=self.id,
            title=self.title,
            completed=self.completed,
            order=self.order,
        )

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def is_bound(self) -> bool:
        return self._repository is not None

    def bind(self, repository: "ITaskRepository") -> None:
        """Attach the repository used for write-through."""
        self._repository = repository

    def unbind(self) -> None:
        """Stop writing through; later saves only update this object."""
        self._repository = None

    def save(self, **attributes: Any) -> None:
        """Merge attributes, write the record, then emit change events.

        ``change:<attribute>`` fires for each attribute whose value changed,
        followed by one ``change``, which fires on every call. If the write
        fails the merge is undone, ``error`` is emitted and the
        ``PersistenceError`` is re-raised.
        """
        self._ensure_alive()
        for name in attributes:
            if name not in MUTABLE_ATTRIBUTES:
                raise InvalidAttributeError(name)

        merged = TaskRecord.model_validate(self.to_record().model_dump() | attributes)
        previous = {name: getattr(self, name) for name in attributes}
        for name in attributes:
            setattr(self, name, getattr(merged, name))

        try:
            self._write()
        except PersistenceError as exc:
            for name, value in previous.items():
                setattr(self, name, value)
            self._report_failure("save", exc)
            raise

        changed = [name for name in attributes if getattr(self, name) != previous[name]]
        logger.debug("task_saved", task_id=self.id, changed=changed)
        for name in changed:
            self.events.publish(
                AttributeChanged(
                    task=self,
                    attribute=name,
                    value=getattr(self, name),
                    previous=previous[name],
                )
            )
        self.events.publish(TaskChanged(task=self, changes=frozenset(changed)))

    def toggle(self) -> None:
        """Flip the completed state."""
        self.save(completed=not self.completed)

    def destroy(self) -> None:
        """Delete the record, emit ``destroy`` and drop every listener."""
        self._ensure_alive()
        if self._repository is not None:
            try:
                self._repository.delete(self.id)
            except PersistenceError as exc:
                self._report_failure("delete", exc)
                raise

        self._destroyed = True
        logger.debug("task_destroyed", task_id=self.id)
        self.events.publish(TaskDestroyed(task=self))
        self.events.clear()

    def request_visibility(self) -> None:
        """Ask observers to recompute this task's visibility."""
        self._ensure_alive()
        self.events.publish(VisibilityRequested(task=self))

    def _write(self) -> None:
        if self._repository is None:
            return
        self._repository.save(self.id, self.to_record())

    def _report_failure(self, operation: str, exc: PersistenceError) -> None:
        logger.error(
            "task_persist_failed",
            task_id=self.id,
            operation=operation,
            error=exc.message,
        )
        self.events.publish(PersistenceFailed(task=self, operation=operation, error=exc))

    def _ensure_alive(self) -> None:
        if self._destroyed:
            raise TaskDestroyedError(self.id)
