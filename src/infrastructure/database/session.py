"""Database session management."""

from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings
from infrastructure.database.models import Base


def create_engine_for(url: str, echo: bool = False) -> Engine:
    """Create an engine for the task store.

    An in-memory SQLite database lives only as long as its connection, so it
    is pinned to a single shared connection.
    """
    kwargs: dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite") and (":memory:" in url or url.rstrip("/") == "sqlite:"):
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_engine(url, **kwargs)


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    """Session factory used by the repositories."""
    return sessionmaker(
        bind=bind,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )


def init_schema(bind: Engine) -> None:
    """Create missing tables."""
    Base.metadata.create_all(bind)


# Created lazily by SQLAlchemy: no connection is opened until first use
engine = create_engine_for(settings.database_url, echo=settings.echo_sql)

session_factory = build_session_factory(engine)
