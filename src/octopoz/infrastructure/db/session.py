from __future__ import annotations

import os
from functools import lru_cache

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url

SQLITE_BUSY_TIMEOUT_SECONDS = 30
READ_ONLY_OPTION = "octopoz_read_only"


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def _enable_sqlite_write_locking(engine: Engine) -> None:
    # pysqlite defers BEGIN until the first write; take the write lock up front so
    # concurrent units of work queue on the busy timeout instead of deadlocking.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # Read-only units keep a deferred BEGIN so slot and status reads do not queue
    # behind writers. SQLite is the local and test backend only.
    @event.listens_for(engine, "begin")
    def _on_begin(connection) -> None:
        if connection.get_execution_options().get(READ_ONLY_OPTION):
            connection.exec_driver_sql("BEGIN")
        else:
            connection.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str, connect_timeout: int = 1) -> Engine:
    if make_url(database_url).get_backend_name() == "sqlite":
        engine = create_engine(
            database_url,
            connect_args={
                "timeout": max(connect_timeout, SQLITE_BUSY_TIMEOUT_SECONDS),
                "check_same_thread": False,
            },
        )
        _enable_sqlite_write_locking(engine)
        return engine

    return create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args={"connect_timeout": connect_timeout},
    )


@lru_cache(maxsize=8)
def _build_engine(database_url: str, connect_timeout: int) -> Engine:
    return build_engine(database_url, connect_timeout)


def get_engine(timeout_seconds: float = 1.0) -> Engine:
    connect_timeout = max(1, int(timeout_seconds))
    return _build_engine(_database_url(), connect_timeout)


def ping_database(timeout_seconds: float = 1.0) -> bool:
    try:
        with get_engine(timeout_seconds).connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
