"""Pytest configuration and fixtures."""

import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from controllers.app_controller import AppController
from controllers.rendering import TextRenderer
from domain.events import Channel, Event, EventBus
from domain.services.filter_state import FilterState
from domain.services.task_list import TaskList
from infrastructure.database.session import build_session_factory, create_engine_for, init_schema
from infrastructure.memory.in_memory_task_repo import InMemoryTaskRepository

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite:///:memory:"

TEST_NAMESPACE = "test-todos"


class EventRecorder:
    """Listener that keeps every event it receives."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def __call__(self, event: Event) -> None:
        self.events.append(event)

    @property
    def channels(self) -> list[str]:
        return [str(event.channel) for event in self.events]

    def of_type(self, event_type: type[Event]) -> list[Event]:
        return [event for event in self.events if isinstance(event, event_type)]


@pytest.fixture
def record() -> Callable[..., EventRecorder]:
    """Attach a recorder to a bus (all channels by default)."""

    def _record(bus: EventBus, channel: Channel = Channel.ALL) -> EventRecorder:
        recorder = EventRecorder()
        bus.subscribe(channel, recorder)
        return recorder

    return _record


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Create test database engine with the schema in place."""
    engine = create_engine_for(TEST_DATABASE_URL)
    init_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create session factory."""
    return build_session_factory(engine)


@pytest.fixture
def repository() -> InMemoryTaskRepository:
    """Fresh in-memory repository."""
    return InMemoryTaskRepository(TEST_NAMESPACE)


@pytest.fixture
def tasks(repository: InMemoryTaskRepository) -> TaskList:
    return TaskList(repository)


@pytest.fixture
def filter_state() -> FilterState:
    return FilterState()


@pytest.fixture
def renderer() -> TextRenderer:
    return TextRenderer()


@pytest.fixture
def app(tasks: TaskList, filter_state: FilterState, renderer: TextRenderer) -> AppController:
    """Aggregate controller wired to the in-memory list."""
    return AppController(tasks, filter_state, renderer)
