"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import contextlib
import os
import socket
import typing as typ

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from quayside.activity import init_activity_storage
from quayside.logging import get_logger, log_warning
from quayside.registry import create_database_engine, init_registry_storage

if typ.TYPE_CHECKING:
    from pathlib import Path

try:
    from py_pglite import PGliteConfig, PGliteManager

    _PGLITE_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    _PGLITE_AVAILABLE = False

logger = get_logger(__name__)


def _should_use_pglite() -> bool:
    """Return True when tests should run against py-pglite Postgres."""
    target = os.getenv("QUAYSIDE_TEST_DB", "pglite").lower()
    return target != "sqlite" and _PGLITE_AVAILABLE


def _find_free_port() -> int:
    """Find an available TCP port for a temporary Postgres instance."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@contextlib.asynccontextmanager
async def _pglite_engine(tmp_path: Path) -> typ.AsyncIterator[AsyncEngine]:
    """Start a py-pglite Postgres and yield an async engine bound to it."""
    port = _find_free_port()
    config = PGliteConfig(
        use_tcp=True,
        tcp_host="127.0.0.1",
        tcp_port=port,
        work_dir=tmp_path / "pglite",
    )

    with PGliteManager(config):
        url = (
            f"postgresql+asyncpg://postgres:postgres@{config.tcp_host}:"
            f"{config.tcp_port}/postgres"
        )
        engine = create_database_engine(url)
        try:
            yield engine
        finally:
            await engine.dispose()


async def _init_all_storage(engine: AsyncEngine) -> None:
    await init_registry_storage(engine)
    await init_activity_storage(engine)


async def _try_setup_pglite(
    tmp_path: Path,
) -> tuple[AsyncEngine, typ.Any] | None:
    """Attempt to set up a py-pglite Postgres engine, or return None."""
    if not _should_use_pglite():
        return None

    engine_cm = None
    try:
        engine_cm = _pglite_engine(tmp_path)
        engine = await engine_cm.__aenter__()
        await _init_all_storage(engine)
    except Exception as exc:  # noqa: BLE001 - fall back to SQLite on any failure
        log_warning(logger, "py-pglite unavailable, falling back to SQLite: %s", exc)
        if engine_cm is not None:
            with contextlib.suppress(Exception):
                await engine_cm.__aexit__(None, None, None)
        return None
    else:
        return (engine, engine_cm)


async def _setup_sqlite(tmp_path: Path) -> AsyncEngine:
    url = f"sqlite+aiosqlite:///{tmp_path / 'quayside_test.db'}"
    engine = create_database_engine(url)
    try:
        await _init_all_storage(engine)
    except Exception:
        await engine.dispose()
        raise
    return engine


@pytest_asyncio.fixture
async def session_factory(
    tmp_path: Path,
) -> typ.AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Yield a fresh async session factory with registry and activity tables."""
    engine_cm = None
    result = await _try_setup_pglite(tmp_path)
    if result is not None:
        engine, engine_cm = result
    else:
        engine = await _setup_sqlite(tmp_path)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    try:
        yield factory
    finally:
        await engine.dispose()
        if engine_cm is not None:
            await engine_cm.__aexit__(None, None, None)
