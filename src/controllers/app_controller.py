"""Controller for the whole task list."""

from typing import Any

import structlog

from controllers.rendering import AppView, Renderer
from controllers.task_controller import TaskController
from domain.entities.task import Task
from domain.events import (
    AttributeChanged,
    Channel,
    Event,
    ListenerGroup,
    TaskAdded,
    TaskDestroyed,
)
from domain.services.filter_state import FilterState
from domain.services.task_list import TaskList

logger = structlog.get_logger()


class AppController:
    """Keeps one TaskController per task and renders the list chrome.

    Any event on the list triggers ``render()``, which switches between the
    empty state (main area and footer hidden) and the populated state (stats
    and selected filter shown).
    """

    def __init__(
        self,
        tasks: TaskList,
        filter_state: FilterState,
        renderer: Renderer,
        commit_key: str = "Enter",
    ) -> None:
        self._tasks = tasks
        self._filter_state = filter_state
        self._renderer = renderer
        self._commit_key = commit_key
        self._items: dict[str, TaskController] = {}
        self.input_text = ""

        self._listeners = ListenerGroup()
        self._listeners.listen_to(tasks.events, Channel.ADD, self._on_add)
        self._listeners.listen_to(tasks.events, Channel.RESET, self._on_reset)
        self._listeners.listen_to(tasks.events, Channel.CHANGE_COMPLETED, self._on_completed_change)
        self._listeners.listen_to(tasks.events, Channel.DESTROY, self._on_destroy)
        self._listeners.listen_to(tasks.events, Channel.ALL, self._on_any)
        self._listeners.listen_to(filter_state.events, Channel.FILTER, self._on_filter)

    @property
    def tasks(self) -> TaskList:
        return self._tasks

    @property
    def is_empty(self) -> bool:
        return len(self._tasks) == 0

    def item(self, task_id: str) -> TaskController | None:
        return self._items.get(task_id)

    def items(self) -> list[TaskController]:
        return list(self._items.values())

    def start(self) -> None:
        """Load the stored tasks; the resulting ``reset`` builds the rows."""
        self._tasks.fetch()

    def stop(self) -> None:
        self._listeners.stop_listening()
        for controller in self._items.values():
            controller.remove()
        self._items.clear()

    def render(self) -> AppView:
        completed = len(self._tasks.completed())
        remaining = len(self._tasks.remaining())
        view = AppView(
            has_items=not self.is_empty,
            completed=completed,
            remaining=remaining,
            selected_filter=self._filter_state.value,
            all_checked=not remaining,
        )
        self._renderer.render_app(view)
        return view

    def add_one(self, task: Task) -> TaskController:
        controller = TaskController(task, self._filter_state, self._renderer, self._commit_key)
        self._items[task.id] = controller
        controller.render()
        return controller

    def add_all(self) -> None:
        for controller in self._items.values():
            controller.remove()
        self._items.clear()
        self._renderer.clear_items()
        for task in self._tasks:
            self.add_one(task)

    def filter_one(self, task: Task) -> None:
        task.request_visibility()

    def filter_all(self) -> None:
        for task in self._tasks:
            self.filter_one(task)

    def update_input(self, text: str) -> None:
        self.input_text = text

    def new_attributes(self) -> dict[str, Any]:
        return {
            "title": self.input_text.strip(),
            "order": self._tasks.next_order(),
            "completed": False,
        }

    def create_on_enter(self, key: str) -> Task | None:
        """Create a task from the input on the commit key; blank input is ignored."""
        if key != self._commit_key or not self.input_text.strip():
            return None
        task = self._tasks.create(**self.new_attributes())
        self.input_text = ""
        return task

    def clear_completed(self) -> int:
        return self._tasks.remove_all_completed()

    def toggle_all_complete(self, checked: bool) -> None:
        self._tasks.toggle_all_to(checked)

    def _on_add(self, event: Event) -> None:
        if isinstance(event, TaskAdded):
            self.add_one(event.task)

    def _on_reset(self, event: Event) -> None:
        self.add_all()

    def _on_completed_change(self, event: Event) -> None:
        if isinstance(event, AttributeChanged) and not event.task.is_destroyed:
            self.filter_one(event.task)

    def _on_destroy(self, event: Event) -> None:
        if not isinstance(event, TaskDestroyed):
            return
        controller = self._items.pop(event.task.id, None)
        if controller is not None:
            controller.remove()

    def _on_any(self, event: Event) -> None:
        self.render()

    def _on_filter(self, event: Event) -> None:
        logger.debug("filter_applied", filter=self._filter_state.value.value, count=len(self._tasks))
        self.filter_all()
        self.render()
