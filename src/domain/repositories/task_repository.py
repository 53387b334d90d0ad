"""Task repository protocol."""

from typing import Protocol

from domain.entities.task import TaskRecord


class ITaskRepository(Protocol):
    """Key-value store of task records, scoped to one namespace.

    Implementations raise ``PersistenceError`` when the underlying storage
    fails.
    """

    @property
    def namespace(self) -> str:
        """Bucket identifier of the list this repository serves."""
        ...

    def load_all(self) -> list[TaskRecord]:
        """Get every record in the namespace, ordered by ``order``."""
        ...

    def save(self, task_id: str, record: TaskRecord) -> None:
        """Insert or replace the record stored under ``task_id``."""
        ...

    def delete(self, task_id: str) -> bool:
        """Delete a record and return whether it existed."""
        ...
