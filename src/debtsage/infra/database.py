"""Engine and session plumbing for the liability store."""

from __future__ import annotations

from contextlib import contextmanager
from functools import partial
from typing import Callable, ContextManager, Iterator, Tuple

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger(__name__)


def create_db_engine(config: BaseConfig) -> Engine:
    return create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())


def init_database(engine: Engine) -> None:
    """Create the liability table if it is missing."""
    # Registers Liability on SQLModel.metadata
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Commit on success, roll back on error, always close."""
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_session_factory(engine: Engine) -> Callable[[], ContextManager[Session]]:
    return partial(session_scope, engine)


def bootstrap_database(config: BaseConfig | None = None) -> Tuple[Engine, Callable]:
    """Open the configured database and ensure its schema.

    Returns (engine, session_factory). The CLI and the demo seeder share this
    path so both see the same engine options.
    """

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    logger.debug("Liability store ready", extra={"url": engine.url.render_as_string()})
    return engine, create_session_factory(engine)
