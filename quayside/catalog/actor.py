"""Dramatiq actor for out-of-band catalog synchronisation.

Usage
-----
Queue a sync for one registry:

>>> sync_registry_catalog_job.send(
...     database_url="postgresql+asyncpg://...",
...     hostname="registry.example.test",
... )

"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import threading

import dramatiq
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from quayside.catalog._broker import ensure_broker_configured
from quayside.catalog.config import CatalogSyncConfig
from quayside.catalog.sync import CatalogSyncService
from quayside.registry.engine import create_database_engine

type SessionFactory = async_sessionmaker[AsyncSession]

# Reused across actor invocations within one worker process.
_ENGINE_CACHE: dict[str, AsyncEngine] = {}
_SERVICE_CACHE: dict[str, CatalogSyncService] = {}
_CACHE_LOCK = threading.Lock()

# The actor decorator binds to the global broker, so one must exist first.
ensure_broker_configured()


def _get_or_create_service(database_url: str) -> CatalogSyncService:
    """Return the cached sync service for ``database_url``.

    Thread-safe: Dramatiq workers run actors on several threads.
    """
    with _CACHE_LOCK:
        if database_url not in _SERVICE_CACHE:
            if database_url not in _ENGINE_CACHE:
                _ENGINE_CACHE[database_url] = create_database_engine(database_url)
            session_factory: SessionFactory = async_sessionmaker(
                _ENGINE_CACHE[database_url], expire_on_commit=False
            )
            _SERVICE_CACHE[database_url] = CatalogSyncService(
                session_factory, config=CatalogSyncConfig.from_env()
            )
        return _SERVICE_CACHE[database_url]


@dramatiq.actor
def sync_registry_catalog_job(database_url: str, hostname: str) -> dict[str, object]:
    """Synchronise one registry's catalog into the database.

    Parameters
    ----------
    database_url
        SQLAlchemy async URL of the Quayside database.
    hostname
        Registered registry hostname to synchronise.

    Returns
    -------
    dict[str, object]
        The :class:`~quayside.catalog.sync.CatalogSyncResult` as a mapping,
        suitable for Dramatiq result backends.

    """
    service = _get_or_create_service(database_url)
    result = asyncio.run(service.sync_registry(hostname))
    return dc.asdict(result)
