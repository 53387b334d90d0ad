"""Visibility filter values and the visibility rule."""

from enum import StrEnum


class TaskFilter(StrEnum):
    """Which subset of tasks is visible. The empty string means all."""

    ALL = ""
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def from_route(cls, raw: str | None) -> "TaskFilter":
        """Lenient parse for route parameters; unknown values mean all."""
        if not raw:
            return cls.ALL
        try:
            return cls(raw)
        except ValueError:
            return cls.ALL


def is_hidden(completed: bool, task_filter: TaskFilter) -> bool:
    """A task is hidden iff the filter selects the other completion state."""
    return (not completed and task_filter == TaskFilter.COMPLETED) or (
        completed and task_filter == TaskFilter.ACTIVE
    )


def is_visible(completed: bool, task_filter: TaskFilter) -> bool:
    return not is_hidden(completed, task_filter)
