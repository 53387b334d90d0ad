"""Unit tests for the Task entity."""

from collections.abc import Callable
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from core.exceptions import InvalidAttributeError, PersistenceError, TaskDestroyedError
from domain.entities.task import Task, TaskRecord
from domain.events import (
    AttributeChanged,
    Channel,
    PersistenceFailed,
    TaskChanged,
    TaskDestroyed,
)
from infrastructure.memory.in_memory_task_repo import InMemoryTaskRepository
from tests.conftest import EventRecorder


@pytest.fixture
def task(repository: InMemoryTaskRepository) -> Task:
    task = Task(title="buy milk", order=1)
    task.bind(repository)
    repository.save(task.id, task.to_record())
    return task


class TestTaskDefaults:
    def test_defaults(self) -> None:
        task = Task(title="walk dog", order=2)

        assert task.completed is False
        assert task.id
        assert not task.is_bound
        assert not task.is_destroyed

    def test_unbind_stops_write_through(
        self, task: Task, repository: InMemoryTaskRepository
    ) -> None:
        task.unbind()

        task.save(title="buy oat milk")

        assert not task.is_bound
        assert task.title == "buy oat milk"
        assert repository.load_all()[0].title == "buy milk"

    def test_ids_are_unique(self) -> None:
        assert Task(title="a", order=1).id != Task(title="a", order=1).id

    def test_record_round_trip(self) -> None:
        task = Task(title="a", order=3, completed=True)

        restored = Task.from_record(task.to_record())

        assert (restored.id, restored.title, restored.completed, restored.order) == (
            task.id,
            "a",
            True,
            3,
        )

    def test_record_rejects_bad_order(self) -> None:
        with pytest.raises(ValidationError):
            TaskRecord(id="x", title="a", order=0)


class TestTaskSave:
    def test_merges_and_writes_through(
        self, task: Task, repository: InMemoryTaskRepository
    ) -> None:
        """Test save merges attributes and persists the full record."""
        task.save(title="buy oat milk")

        assert task.title == "buy oat milk"
        stored = {r.id: r for r in repository.load_all()}[task.id]
        assert stored.title == "buy oat milk"
        assert stored.order == 1

    def test_emits_attribute_then_generic_change(
        self, task: Task, record: Callable[..., EventRecorder]
    ) -> None:
        events = record(task.events)

        task.save(completed=True)

        assert events.channels == ["change:completed", "change"]
        attribute_event = events.events[0]
        assert isinstance(attribute_event, AttributeChanged)
        assert attribute_event.previous is False
        assert attribute_event.value is True
        change = events.events[1]
        assert isinstance(change, TaskChanged)
        assert change.changes == frozenset({"completed"})

    def test_generic_change_fires_without_value_change(
        self, task: Task, record: Callable[..., EventRecorder]
    ) -> None:
        """Test every save emits change even when nothing differs."""
        events = record(task.events)

        task.save(title="buy milk")
        task.save(title="buy milk")
        task.save(title="buy milk")

        assert events.channels == ["change", "change", "change"]

    def test_immutable_attributes_rejected(self, task: Task) -> None:
        with pytest.raises(InvalidAttributeError):
            task.save(order=7)
        with pytest.raises(InvalidAttributeError):
            task.save(id="other")
        with pytest.raises(InvalidAttributeError):
            task.save(priority="high")
        assert task.order == 1

    def test_values_are_validated(self, task: Task) -> None:
        with pytest.raises(ValidationError):
            task.save(completed="not a bool")

    def test_toggle(self, task: Task) -> None:
        task.toggle()
        assert task.completed is True
        task.toggle()
        assert task.completed is False

    def test_unbound_task_saves_in_memory(self) -> None:
        task = Task(title="draft", order=1)
        calls: list[object] = []
        task.events.subscribe(Channel.CHANGE, calls.append)

        task.save(title="final")

        assert task.title == "final"
        assert len(calls) == 1

    def test_failed_write_rolls_back(
        self,
        task: Task,
        repository: InMemoryTaskRepository,
        record: Callable[..., EventRecorder],
    ) -> None:
        """Test a failed write restores attributes and surfaces the error."""
        events = record(task.events)

        with patch.object(repository, "save", side_effect=PersistenceError("save", task.id)):
            with pytest.raises(PersistenceError):
                task.save(title="changed", completed=True)

        assert task.title == "buy milk"
        assert task.completed is False
        assert events.channels == ["error"]
        failure = events.events[0]
        assert isinstance(failure, PersistenceFailed)
        assert failure.operation == "save"


class TestTaskDestroy:
    def test_deletes_and_emits_destroy(
        self,
        task: Task,
        repository: InMemoryTaskRepository,
        record: Callable[..., EventRecorder],
    ) -> None:
        events = record(task.events)

        task.destroy()

        assert task.is_destroyed
        assert len(repository) == 0
        assert events.channels == ["destroy"]
        assert isinstance(events.events[0], TaskDestroyed)
        assert events.events[0].task is task

    def test_destroy_is_terminal(self, task: Task) -> None:
        """Test no listener survives destroy and later operations fail."""
        task.destroy()

        assert task.events.listener_count() == 0
        with pytest.raises(TaskDestroyedError):
            task.save(title="again")
        with pytest.raises(TaskDestroyedError):
            task.toggle()
        with pytest.raises(TaskDestroyedError):
            task.destroy()

    def test_failed_delete_keeps_task(
        self,
        task: Task,
        repository: InMemoryTaskRepository,
        record: Callable[..., EventRecorder],
    ) -> None:
        events = record(task.events)

        with patch.object(repository, "delete", side_effect=PersistenceError("delete", task.id)):
            with pytest.raises(PersistenceError):
                task.destroy()

        assert not task.is_destroyed
        assert events.channels == ["error"]
        assert len(repository) == 1

    def test_request_visibility(self, task: Task, record: Callable[..., EventRecorder]) -> None:
        events = record(task.events)

        task.request_visibility()

        assert events.channels == ["visible"]
