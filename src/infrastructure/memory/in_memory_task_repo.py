"""Dictionary-backed task repository."""

from domain.entities.task import TaskRecord

Storage = dict[str, dict[str, TaskRecord]]


class InMemoryTaskRepository:
    """ITaskRepository kept in process memory.

    Several repositories may share one ``storage`` mapping, each seeing only
    the bucket of its own namespace.
    """

    def __init__(self, namespace: str = "todos", storage: Storage | None = None) -> None:
        self._namespace = namespace
        self._storage: Storage = storage if storage is not None else {}

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def _bucket(self) -> dict[str, TaskRecord]:
        return self._storage.setdefault(self._namespace, {})

    def load_all(self) -> list[TaskRecord]:
        return sorted(self._bucket.values(), key=lambda record: record.order)

    def save(self, task_id: str, record: TaskRecord) -> None:
        self._bucket[task_id] = record

    def delete(self, task_id: str) -> bool:
        return self._bucket.pop(task_id, None) is not None

    def __len__(self) -> int:
        return len(self._bucket)
