"""Unit tests for filter values, the visibility rule and FilterState."""

from collections.abc import Callable

import pytest

from core.exceptions import InvalidFilterError
from domain.entities.filter import TaskFilter, is_hidden, is_visible
from domain.entities.task import Task
from domain.events import FilterChanged
from domain.services.filter_state import FilterState
from tests.conftest import EventRecorder


class TestVisibilityRule:
    @pytest.mark.parametrize(
        ("completed", "task_filter", "visible"),
        [
            (False, TaskFilter.ALL, True),
            (True, TaskFilter.ALL, True),
            (False, TaskFilter.ACTIVE, True),
            (True, TaskFilter.ACTIVE, False),
            (False, TaskFilter.COMPLETED, False),
            (True, TaskFilter.COMPLETED, True),
        ],
    )
    def test_visibility_table(self, completed: bool, task_filter: TaskFilter, visible: bool) -> None:
        assert is_visible(completed, task_filter) is visible
        assert is_hidden(completed, task_filter) is (not visible)
        expected_hidden = (not completed and task_filter == "completed") or (
            completed and task_filter == "active"
        )
        assert is_hidden(completed, task_filter) == expected_hidden


class TestTaskFilter:
    def test_empty_string_means_all(self) -> None:
        assert TaskFilter("") is TaskFilter.ALL

    def test_from_route(self) -> None:
        assert TaskFilter.from_route("active") is TaskFilter.ACTIVE
        assert TaskFilter.from_route("completed") is TaskFilter.COMPLETED
        assert TaskFilter.from_route(None) is TaskFilter.ALL
        assert TaskFilter.from_route("archived") is TaskFilter.ALL


class TestFilterState:
    def test_defaults_to_all(self, filter_state: FilterState) -> None:
        assert filter_state.value is TaskFilter.ALL

    def test_set_emits_filter(
        self, filter_state: FilterState, record: Callable[..., EventRecorder]
    ) -> None:
        events = record(filter_state.events)

        filter_state.set("active")

        assert filter_state.value is TaskFilter.ACTIVE
        assert events.channels == ["filter"]
        event = events.events[0]
        assert isinstance(event, FilterChanged)
        assert event.previous is TaskFilter.ALL

    def test_set_same_value_still_emits(
        self, filter_state: FilterState, record: Callable[..., EventRecorder]
    ) -> None:
        events = record(filter_state.events)

        filter_state.set(TaskFilter.ALL)
        filter_state.set(TaskFilter.ALL)

        assert events.channels == ["filter", "filter"]

    def test_unknown_value_rejected(self, filter_state: FilterState) -> None:
        with pytest.raises(InvalidFilterError):
            filter_state.set("archived")
        assert filter_state.value is TaskFilter.ALL

    def test_visibility_follows_current_value(self, filter_state: FilterState) -> None:
        """Test visibility is recomputed from the live completed flag and filter."""
        task = Task(title="t", order=1)
        filter_state.set(TaskFilter.COMPLETED)
        assert filter_state.is_hidden(task)

        task.completed = True
        assert filter_state.is_visible(task)

        filter_state.set(TaskFilter.ACTIVE)
        assert filter_state.is_hidden(task)

    def test_independent_states(self) -> None:
        first = FilterState()
        second = FilterState()

        first.set(TaskFilter.ACTIVE)

        assert second.value is TaskFilter.ALL
