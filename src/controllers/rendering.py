"""Presentation hook: view states handed to a renderer."""

from dataclasses import dataclass
from typing import Protocol

from domain.entities.filter import TaskFilter


@dataclass(frozen=True)
class ItemView:
    """State of one task row at render time."""

    task_id: str
    title: str
    completed: bool
    hidden: bool
    editing: bool = False
    draft: str = ""


@dataclass(frozen=True)
class AppView:
    """State of the list chrome (main area, footer stats, filter links)."""

    has_items: bool
    completed: int
    remaining: int
    selected_filter: TaskFilter
    all_checked: bool


class Renderer(Protocol):
    """Materializes view states. The engine decides when, never how."""

    def render_item(self, view: ItemView) -> None:
        ...

    def remove_item(self, task_id: str) -> None:
        ...

    def clear_items(self) -> None:
        ...

    def render_app(self, view: AppView) -> None:
        ...


class TextRenderer:
    """Renderer that keeps the latest state as plain text lines."""

    def __init__(self) -> None:
        # insertion order is display order
        self.items: dict[str, ItemView] = {}
        self.app: AppView | None = None
        self.render_count = 0

    def render_item(self, view: ItemView) -> None:
        self.items[view.task_id] = view
        self.render_count += 1

    def remove_item(self, task_id: str) -> None:
        self.items.pop(task_id, None)

    def clear_items(self) -> None:
        self.items.clear()

    def render_app(self, view: AppView) -> None:
        self.app = view

    def visible_items(self) -> list[ItemView]:
        return [view for view in self.items.values() if not view.hidden]

    def lines(self) -> list[str]:
        """Visible rows followed by the footer; empty when the list is empty."""
        if self.app is None or not self.app.has_items:
            return []
        rows = [self._format_item(view) for view in self.visible_items()]
        rows.append(self._format_footer(self.app))
        return rows

    def __str__(self) -> str:
        return "\n".join(self.lines())

    @staticmethod
    def _format_item(view: ItemView) -> str:
        mark = "x" if view.completed else " "
        if view.editing:
            return f"[{mark}] > {view.draft}"
        return f"[{mark}] {view.title}"

    @staticmethod
    def _format_footer(view: AppView) -> str:
        noun = "item" if view.remaining == 1 else "items"
        parts = [f"{view.remaining} {noun} left"]
        if view.completed:
            parts.append(f"clear completed ({view.completed})")
        parts.append(f"filter: {view.selected_filter.value or 'all'}")
        return " | ".join(parts)
