import logging
import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from retail_orders.config import Settings, get_settings


app_settings: Settings = get_settings()
logger = logging.getLogger(__name__)


def _is_sqlite_memory(url) -> bool:
    database = url.database
    if database in (None, "", ":memory:"):
        return True
    return url.query.get("mode") == "memory"


def build_engine(database_url: str, *, busy_timeout_seconds: int | None = None) -> Engine:
    """Create an engine with the connection settings every schema constraint relies on.

    SQLite only enforces foreign keys (and therefore ON DELETE CASCADE) when
    ``PRAGMA foreign_keys`` is switched on for each connection, so the pragma is
    installed on connect rather than left to callers.
    """
    if busy_timeout_seconds is None:
        busy_timeout_seconds = app_settings.SQLITE_BUSY_TIMEOUT_SECONDS

    url = make_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"
    is_memory = is_sqlite and _is_sqlite_memory(url)

    connect_args = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True)
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": busy_timeout_seconds}
        if is_memory:
            engine_kwargs.update(poolclass=StaticPool)

    engine = create_engine(database_url, connect_args=connect_args, **engine_kwargs)

    if is_sqlite:
        busy_timeout_ms = busy_timeout_seconds * 1000

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
                if not is_memory:
                    try:
                        cursor.execute("PRAGMA journal_mode=WAL")
                        cursor.execute("PRAGMA synchronous=NORMAL")
                    except sqlite3.DatabaseError:
                        logger.warning("WAL journaling unavailable for %s", url.database)
            finally:
                cursor.close()

    return engine


engine = build_engine(app_settings.DATABASE_URL)


__all__ = ["build_engine", "engine"]
