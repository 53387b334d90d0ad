"""Maps location fragments to filter values."""

import structlog

from domain.entities.filter import TaskFilter
from domain.services.filter_state import FilterState

logger = structlog.get_logger()


class FilterRouter:
    """Single catch-all route: the whole fragment is the filter parameter.

    ``#/``, ``#/active`` and ``#/completed`` select a filter; anything else
    falls back to showing all tasks.
    """

    def __init__(self, filter_state: FilterState) -> None:
        self._filter_state = filter_state
        self.fragment = ""

    @staticmethod
    def parse(fragment: str) -> TaskFilter:
        param = fragment.strip().lstrip("#").strip("/")
        value = TaskFilter.from_route(param)
        if param and value.value != param:
            logger.warning("route_unknown", fragment=fragment)
        return value

    def navigate(self, fragment: str) -> TaskFilter:
        """Apply the filter named by ``fragment`` and return it."""
        value = self.parse(fragment)
        self.fragment = fragment
        self._filter_state.set(value)
        return value

    @staticmethod
    def link_for(task_filter: TaskFilter) -> str:
        """Fragment that selects ``task_filter``."""
        return f"#/{task_filter.value}"
