"""Application entry point: wires storage, state and controllers."""

from dataclasses import dataclass

import structlog

from controllers.app_controller import AppController
from controllers.rendering import Renderer, TextRenderer
from controllers.router import FilterRouter
from core.config import Settings, settings as default_settings
from core.logging import setup_logging
from domain.repositories.task_repository import ITaskRepository
from domain.services.filter_state import FilterState
from domain.services.task_list import TaskList
from infrastructure.database import session as db_session
from infrastructure.database.repositories.sqlalchemy_task_repo import SQLAlchemyTaskRepository

logger = structlog.get_logger()


@dataclass
class Application:
    """Everything one running list needs."""

    settings: Settings
    tasks: TaskList
    filter_state: FilterState
    renderer: Renderer
    controller: AppController
    router: FilterRouter

    def start(self, fragment: str = "") -> None:
        """Hydrate from storage, then apply the initial route."""
        self.controller.start()
        self.router.navigate(fragment)
        logger.info(
            "app_started",
            app_name=self.settings.app_name,
            namespace=self.tasks.namespace,
            count=len(self.tasks),
            filter=self.filter_state.value.value,
        )


def build_repository(app_settings: Settings) -> SQLAlchemyTaskRepository:
    """SQLAlchemy repository for the configured database and namespace."""
    if app_settings.database_url == default_settings.database_url:
        engine = db_session.engine
        factory = db_session.session_factory
    else:
        engine = db_session.create_engine_for(app_settings.database_url, echo=app_settings.echo_sql)
        factory = db_session.build_session_factory(engine)
    db_session.init_schema(engine)
    return SQLAlchemyTaskRepository(factory, app_settings.storage_namespace)


def create_app(
    app_settings: Settings | None = None,
    repository: ITaskRepository | None = None,
    renderer: Renderer | None = None,
) -> Application:
    """Create and wire the application."""
    app_settings = app_settings or default_settings
    setup_logging(app_settings.log_level, app_settings.log_json)

    if repository is None:
        repository = build_repository(app_settings)
    if renderer is None:
        renderer = TextRenderer()

    tasks = TaskList(repository)
    filter_state = FilterState()
    controller = AppController(tasks, filter_state, renderer, commit_key=app_settings.commit_key)
    router = FilterRouter(filter_state)

    return Application(
        settings=app_settings,
        tasks=tasks,
        filter_state=filter_state,
        renderer=renderer,
        controller=controller,
        router=router,
    )


if __name__ == "__main__":
    app = create_app()
    app.start()
    print(app.renderer)
