"""Event variants and the synchronous event bus.

Every event is a frozen dataclass that names its own channel. A bus keeps an
explicit listener table per channel; ``Channel.ALL`` listeners receive every
event after the channel's own listeners.

Delivery is synchronous and in registration order. A listener that publishes
again causes nested delivery before the outer dispatch continues.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from domain.entities.filter import TaskFilter
    from domain.entities.task import Task


class Channel(StrEnum):
    """Notification channels."""

    ADD = "add"
    CHANGE = "change"
    CHANGE_TITLE = "change:title"
    CHANGE_COMPLETED = "change:completed"
    DESTROY = "destroy"
    RESET = "reset"
    FILTER = "filter"
    VISIBLE = "visible"
    ERROR = "error"
    ALL = "all"

    @classmethod
    def for_attribute(cls, attribute: str) -> "Channel":
        """Channel of the per-attribute change event."""
        return cls(f"change:{attribute}")


@dataclass(frozen=True)
class Event:
    """Base class for all events."""

    channel: ClassVar[Channel]


@dataclass(frozen=True)
class TaskAdded(Event):
    channel: ClassVar[Channel] = Channel.ADD

    task: "Task"


@dataclass(frozen=True)
class AttributeChanged(Event):
    """One attribute of a task took a new value."""

    task: "Task"
    attribute: str
    value: Any
    previous: Any

    @property
    def channel(self) -> Channel:  # type: ignore[override]
        return Channel.for_attribute(self.attribute)


@dataclass(frozen=True)
class TaskChanged(Event):
    """A save() completed. ``changes`` may be empty."""

    channel: ClassVar[Channel] = Channel.CHANGE

    task: "Task"
    changes: frozenset[str]


@dataclass(frozen=True)
class TaskDestroyed(Event):
    channel: ClassVar[Channel] = Channel.DESTROY

    task: "Task"


@dataclass(frozen=True)
class ListReset(Event):
    """The membership of a list was replaced in bulk."""

    channel: ClassVar[Channel] = Channel.RESET

    size: int


@dataclass(frozen=True)
class FilterChanged(Event):
    channel: ClassVar[Channel] = Channel.FILTER

    value: "TaskFilter"
    previous: "TaskFilter"


@dataclass(frozen=True)
class VisibilityRequested(Event):
    """Ask observers of a task to recompute its visibility."""

    channel: ClassVar[Channel] = Channel.VISIBLE

    task: "Task"


@dataclass(frozen=True)
class PersistenceFailed(Event):
    """A write-through failed and the local mutation was rolled back."""

    channel: ClassVar[Channel] = Channel.ERROR

    task: "Task"
    operation: str
    error: Exception


Listener = Callable[[Event], None]


class Subscription:
    """Handle returned by EventBus.subscribe()."""

    __slots__ = ("_bus", "channel", "listener", "active")

    def __init__(self, bus: "EventBus", channel: Channel, listener: Listener) -> None:
        self._bus = bus
        self.channel = channel
        self.listener = listener
        self.active = True

    def cancel(self) -> None:
        """Detach the listener. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self._bus._discard(self)


class EventBus:
    """Per-channel listener table with synchronous delivery."""

    def __init__(self) -> None:
        self._listeners: dict[Channel, list[Subscription]] = {}

    def subscribe(self, channel: Channel, listener: Listener) -> Subscription:
        """Register a listener on a channel."""
        subscription = Subscription(self, channel, listener)
        self._listeners.setdefault(channel, []).append(subscription)
        return subscription

    def publish(self, event: Event) -> None:
        """Deliver an event to its channel, then to ``Channel.ALL``."""
        channel = event.channel
        targets = list(self._listeners.get(channel, ()))
        if channel is not Channel.ALL:
            targets.extend(self._listeners.get(Channel.ALL, ()))
        for subscription in targets:
            # cancelled by an earlier listener of this same dispatch
            if subscription.active:
                subscription.listener(event)

    def listener_count(self, channel: Channel | None = None) -> int:
        """Number of attached listeners, on one channel or overall."""
        if channel is not None:
            return len(self._listeners.get(channel, ()))
        return sum(len(subs) for subs in self._listeners.values())

    def clear(self) -> None:
        """Detach every listener."""
        for subscriptions in self._listeners.values():
            for subscription in subscriptions:
                subscription.active = False
        self._listeners.clear()

    def _discard(self, subscription: Subscription) -> None:
        subscriptions = self._listeners.get(subscription.channel)
        if not subscriptions:
            return
        try:
            subscriptions.remove(subscription)
        except ValueError:
            return
        if not subscriptions:
            del self._listeners[subscription.channel]


class ListenerGroup:
    """Subscriptions owned by one observer, detached together."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def listen_to(self, bus: EventBus, channel: Channel, listener: Listener) -> Subscription:
        subscription = bus.subscribe(channel, listener)
        self._subscriptions.append(subscription)
        return subscription

    def stop_listening(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()

    def __len__(self) -> int:
        return sum(1 for s in self._subscriptions if s.active)
