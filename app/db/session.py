# app/db/session.py
from contextlib import contextmanager
from typing import Callable, ContextManager, Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.settings import Settings, get_settings
from app.db.init_db import init_db

SessionFactory = Callable[[], ContextManager[Session]]

_engine: Optional[Engine] = None
_session_context: Optional[SessionFactory] = None


def create_db_engine(settings: Settings) -> Engine:
    # Use the database_url property which handles both direct DATABASE_URL and SQLITE_DB_PATH
    engine = create_engine(settings.database_url, echo=settings.DEBUG_SQL)
    init_db(engine)
    return engine


def make_session_context(engine: Engine) -> SessionFactory:
    """Build a context-manager factory that yields sessions bound to `engine`."""
    # expire_on_commit=False will prevent attributes from being expired
    # after commit.
    maker = sessionmaker(bind=engine, expire_on_commit=False)

    @contextmanager
    def session_context() -> Generator[Session, None, None]:
        with maker() as session:
            try:
                yield session
            except Exception:
                session.rollback()
                raise

    return session_context


def get_engine() -> Engine:
    global _engine, _session_context
    if _engine is None:
        _engine = create_db_engine(get_settings())
        _session_context = make_session_context(_engine)
    return _engine


def reset_engine() -> None:
    """Dispose the shared engine so the next call picks up fresh settings."""
    global _engine, _session_context
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_context = None


@contextmanager
def get_session_context() -> Generator[Session, None, None]:
    """Provide a session on the shared engine.

    The caller is responsible for session.commit() if changes need to be persisted.
    """
    get_engine()
    with _session_context() as session:
        yield session
