"""Ordered, uniquely keyed collection of tasks."""

import bisect
from collections.abc import Iterator

import structlog

from core.exceptions import DuplicateTaskError, PersistenceError
from domain.entities.task import Task, TaskRecord, new_task_id
from domain.events import Channel, Event, EventBus, ListReset, Subscription, TaskAdded, TaskDestroyed
from domain.repositories.task_repository import ITaskRepository

logger = structlog.get_logger()


def _order_key(task: Task) -> int:
    return task.order


class TaskList:
    """Tasks of one namespace, iterated by ascending ``order``.

    Events of member tasks are re-published on ``events`` after the list has
    updated its own membership, so a ``destroy`` seen here always refers to a
    task that is no longer a member.
    """

    def __init__(self, repository: ITaskRepository) -> None:
        self._repository = repository
        self._tasks: list[Task] = []
        self._by_id: dict[str, Task] = {}
        self._forwarders: dict[str, Subscription] = {}
        self.events = EventBus()

    @property
    def namespace(self) -> str:
        return self._repository.namespace

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        # snapshot: destroying while iterating is allowed
        return iter(list(self._tasks))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Task):
            return self._by_id.get(item.id) is item
        return item in self._by_id

    def get(self, task_id: str) -> Task | None:
        return self._by_id.get(task_id)

    def first(self) -> Task | None:
        return self._tasks[0] if self._tasks else None

    def last(self) -> Task | None:
        return self._tasks[-1] if self._tasks else None

    def next_order(self) -> int:
        """Order for the next created task: 1 when empty, else max + 1."""
        if not self._tasks:
            return 1
        return self._tasks[-1].order + 1

    def completed(self) -> list[Task]:
        return [task for task in self._tasks if task.completed]

    def remaining(self) -> list[Task]:
        return [task for task in self._tasks if not task.completed]

    def create(
        self,
        title: str,
        completed: bool = False,
        order: int | None = None,
    ) -> Task | None:
        """Create, persist and add a task.

        Blank titles are refused: nothing is stored, no event fires and
        ``None`` is returned. Other attributes are validated as a
        ``TaskRecord`` before anything is stored.
        """
        title = title.strip()
        if not title:
            logger.debug("task_create_refused", reason="empty_title", namespace=self.namespace)
            return None

        task = Task.from_record(
            TaskRecord(
                id=new_task_id(),
                title=title,
                completed=completed,
                order=self.next_order() if order is None else order,
            )
        )
        if task.id in self._by_id:
            raise DuplicateTaskError(task.id)

        try:
            self._repository.save(task.id, task.to_record())
        except PersistenceError as exc:
            logger.error(
                "task_persist_failed",
                task_id=task.id,
                operation="create",
                error=exc.message,
            )
            raise

        self._insert(task)
        logger.info("task_created", task_id=task.id, order=task.order, namespace=self.namespace)
        self.events.publish(TaskAdded(task=task))
        return task

    def fetch(self) -> int:
        """Replace the membership with the stored records and emit ``reset``."""
        records = self._repository.load_all()

        for subscription in self._forwarders.values():
            subscription.cancel()
        self._forwarders.clear()
        # replaced members stop writing through
        for task in self._tasks:
            task.unbind()
        self._tasks.clear()
        self._by_id.clear()

        for record in records:
            if record.id in self._by_id:
                logger.warning("task_record_duplicate", task_id=record.id)
                continue
            self._insert(Task.from_record(record))

        logger.info("task_list_fetched", namespace=self.namespace, count=len(self._tasks))
        self.events.publish(ListReset(size=len(self._tasks)))
        return len(self._tasks)

    def remove_all_completed(self) -> int:
        """Destroy every completed task. Returns how many were destroyed."""
        doomed = self.completed()
        for task in doomed:
            task.destroy()
        if doomed:
            logger.info("completed_tasks_cleared", count=len(doomed), namespace=self.namespace)
        return len(doomed)

    def toggle_all_to(self, completed: bool) -> None:
        """Save the same completed state on every task."""
        for task in list(self._tasks):
            task.save(completed=completed)

    def _insert(self, task: Task) -> None:
        task.bind(self._repository)
        bisect.insort_right(self._tasks, task, key=_order_key)
        self._by_id[task.id] = task
        self._forwarders[task.id] = task.events.subscribe(Channel.ALL, self._on_task_event)

    def _discard(self, task: Task) -> None:
        if self._by_id.get(task.id) is not task:
            return
        del self._by_id[task.id]
        self._tasks.remove(task)
        subscription = self._forwarders.pop(task.id, None)
        if subscription is not None:
            subscription.cancel()

    def _on_task_event(self, event: Event) -> None:
        if isinstance(event, TaskDestroyed):
            self._discard(event.task)
        self.events.publish(event)
