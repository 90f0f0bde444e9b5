"""Async engine construction shared by the service, CLI, worker and tests.

``find_or_create`` relies on SAVEPOINTs nested in the caller's transaction.
The pysqlite-derived drivers (including aiosqlite) manage transactions
themselves and do not emit ``BEGIN`` until the first DML statement, so the
SAVEPOINT becomes the outermost SQLite transaction and its RELEASE commits.
For SQLite URLs the driver's transaction handling is switched off and
SQLAlchemy emits ``BEGIN`` itself, which keeps every push atomic.
"""

from __future__ import annotations

import typing as typ

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine

if typ.TYPE_CHECKING:
    from sqlalchemy.engine import Connection
    from sqlalchemy.ext.asyncio import AsyncEngine
    from sqlalchemy.pool import ConnectionPoolEntry

__all__ = ["create_database_engine"]


def _install_sqlite_transaction_hooks(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(
        dbapi_connection: typ.Any,  # noqa: ANN401 - driver connection adapter
        _record: ConnectionPoolEntry,
    ) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn: Connection) -> None:
        conn.exec_driver_sql("BEGIN")


def create_database_engine(
    database_url: str,
    **kwargs: typ.Any,  # noqa: ANN401 - create_async_engine options
) -> AsyncEngine:
    """Create an async engine for ``database_url``.

    Parameters
    ----------
    database_url
        SQLAlchemy async URL, e.g. ``postgresql+asyncpg://...`` or
        ``sqlite+aiosqlite:///quayside.db``.
    **kwargs
        Passed through to :func:`sqlalchemy.ext.asyncio.create_async_engine`.

    Returns
    -------
    AsyncEngine
        Engine whose transactions enclose nested SAVEPOINTs on every backend.

    """
    engine = create_async_engine(database_url, **kwargs)
    if make_url(database_url).get_backend_name() == "sqlite":
        _install_sqlite_transaction_hooks(engine)
    return engine
