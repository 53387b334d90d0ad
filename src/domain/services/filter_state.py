"""Current visibility filter, shared by the controllers of one list."""

import structlog

from core.exceptions import InvalidFilterError
from domain.entities.filter import TaskFilter, is_visible
from domain.entities.task import Task
from domain.events import EventBus, FilterChanged

logger = structlog.get_logger()


class FilterState:
    """Holds the active ``TaskFilter`` and broadcasts ``filter`` on every set."""

    def __init__(self, initial: TaskFilter = TaskFilter.ALL) -> None:
        self._value = initial
        self.events = EventBus()

    @property
    def value(self) -> TaskFilter:
        return self._value

    def set(self, value: TaskFilter | str) -> None:
        """Set the filter. Emits ``filter`` even when the value is unchanged."""
        try:
            new_value = TaskFilter(value)
        except ValueError:
            raise InvalidFilterError(str(value)) from None

        previous = self._value
        self._value = new_value
        logger.debug("filter_set", value=new_value.value, previous=previous.value)
        self.events.publish(FilterChanged(value=new_value, previous=previous))

    def is_visible(self, task: Task) -> bool:
        return is_visible(task.completed, self._value)

    def is_hidden(self, task: Task) -> bool:
        return not self.is_visible(task)
