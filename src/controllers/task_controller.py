"""Controller for a single task row."""

import weakref
from enum import StrEnum

import structlog

from controllers.rendering import ItemView, Renderer
from core.exceptions import PersistenceError, StaleHandleError
from domain.entities.task import Task
from domain.events import Channel, Event, ListenerGroup
from domain.services.filter_state import FilterState

logger = structlog.get_logger()


class ViewMode(StrEnum):
    VIEWING = "viewing"
    EDITING = "editing"


class TaskHandle:
    """Non-owning, revocable reference to a task."""

    def __init__(self, task: Task) -> None:
        self._ref = weakref.ref(task)
        self._task_id = task.id
        self._revoked = False

    @property
    def task_id(self) -> str:
        return self._task_id

    @property
    def revoked(self) -> bool:
        return self._revoked

    @property
    def alive(self) -> bool:
        return not self._revoked and self._ref() is not None

    def get(self) -> Task:
        task = None if self._revoked else self._ref()
        if task is None:
            raise StaleHandleError(self._task_id)
        return task

    def revoke(self) -> None:
        self._revoked = True


class TaskController:
    """Renders one task and turns row input into task operations.

    The controller detaches itself when its task is destroyed; from then on
    every operation raises ``StaleHandleError``.
    """

    def __init__(
        self,
        task: Task,
        filter_state: FilterState,
        renderer: Renderer,
        commit_key: str = "Enter",
    ) -> None:
        self._handle = TaskHandle(task)
        self._filter_state = filter_state
        self._renderer = renderer
        self._commit_key = commit_key
        self.mode = ViewMode.VIEWING
        self.draft = ""

        self._listeners = ListenerGroup()
        self._listeners.listen_to(task.events, Channel.CHANGE, self._on_change)
        self._listeners.listen_to(task.events, Channel.DESTROY, self._on_destroy)
        self._listeners.listen_to(task.events, Channel.VISIBLE, self._on_visible)

    @property
    def task_id(self) -> str:
        return self._handle.task_id

    @property
    def attached(self) -> bool:
        return self._handle.alive

    @property
    def is_hidden(self) -> bool:
        return self._filter_state.is_hidden(self._handle.get())

    def render(self) -> ItemView:
        task = self._handle.get()
        view = ItemView(
            task_id=task.id,
            title=task.title,
            completed=task.completed,
            hidden=self._filter_state.is_hidden(task),
            editing=self.mode is ViewMode.EDITING,
            draft=self.draft,
        )
        self._renderer.render_item(view)
        return view

    def toggle_visible(self) -> ItemView:
        """Re-render with the visibility the current filter implies."""
        return self.render()

    def toggle_completed(self) -> None:
        self._handle.get().toggle()

    def edit(self) -> None:
        """Enter editing mode with the draft seeded from the title."""
        task = self._handle.get()
        self.mode = ViewMode.EDITING
        self.draft = task.title
        self.render()

    def update_draft(self, text: str) -> None:
        self._handle.get()
        self.draft = text

    def close(self) -> None:
        """Leave editing mode, saving the trimmed draft.

        A blank draft destroys the task instead.
        """
        task = self._handle.get()
        if self.mode is not ViewMode.EDITING:
            return

        title = self.draft.strip()
        self.mode = ViewMode.VIEWING
        try:
            if title:
                task.save(title=title)
            else:
                logger.debug("task_edit_emptied", task_id=task.id)
                task.destroy()
        except PersistenceError:
            # still editing: the draft was not applied
            self.mode = ViewMode.EDITING
            raise

    def key_press(self, key: str) -> None:
        if key == self._commit_key:
            self.close()

    def blur(self) -> None:
        self.close()

    def clear(self) -> None:
        self._handle.get().destroy()

    def remove(self) -> None:
        """Detach from the task and drop the row."""
        if self._handle.revoked:
            return
        self._listeners.stop_listening()
        self._handle.revoke()
        self._renderer.remove_item(self._handle.task_id)

    def _on_change(self, event: Event) -> None:
        self.render()

    def _on_destroy(self, event: Event) -> None:
        self.remove()

    def _on_visible(self, event: Event) -> None:
        self.toggle_visible()
