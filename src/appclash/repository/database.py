"""Database engine and session factory helpers."""

from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from appclash.repository.tables import Base

_IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}


def _configure_sqlite(
    dbapi_connection: Any, connection_record: Any  # noqa: ARG001
) -> None:
    """Enable WAL mode and foreign keys on every new SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine and make sure every table exists.

    Store calls run on worker threads, so SQLite connections are opened
    with ``check_same_thread`` disabled.  In-memory databases share one
    connection so that every thread sees the same tables.
    """
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in _IN_MEMORY_URLS:
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)
        event.listen(engine, "connect", _configure_sqlite)
    else:
        engine = create_engine(url, echo=echo, pool_pre_ping=True)

    Base.metadata.create_all(bind=engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def check_database_health(engine: Engine) -> bool:
    """Return True when a trivial query succeeds."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
