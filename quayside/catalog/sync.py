"""Reconcile local repository state against a registry's catalog.

The catalog API is the authoritative list of what a registry stores. Each
repository it reports is fed through the bulk reconciliation path, which
creates missing tags and deletes tags the registry no longer has. Catalog
entries in namespaces that were never provisioned are skipped, mirroring
how live push events treat them.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import typing as typ

import msgspec

from quayside.events.errors import UnknownNamespaceError
from quayside.ingestion.namespaces import NamespaceResolver
from quayside.ingestion.reconciler import RepositoryReconciler
from quayside.logging import get_logger, log_info
from quayside.registry.errors import RegistryNotFoundError
from quayside.registry.mapping import to_repository_info
from quayside.registry.queries import registry_by_hostname, tags_of

from .client import RegistryCatalogClient, RepositoryDescriptor
from .config import CatalogSyncConfig

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from quayside.logging import SupportsLog
    from quayside.registry.models import RepositoryInfo

type CatalogClientFactory = cabc.Callable[[str], RegistryCatalogClient]


class CatalogSyncEventType(enum.StrEnum):
    """Structured log event types for catalog synchronisation."""

    SYNC_STARTED = "catalog.sync.started"
    SYNC_COMPLETED = "catalog.sync.completed"
    REPOSITORY_SKIPPED = "catalog.sync.skipped"


@dc.dataclass(frozen=True, slots=True)
class CatalogSyncResult:
    """Counts produced by one catalog synchronisation run."""

    hostname: str
    repositories_synced: int = 0
    repositories_skipped: int = 0


class CatalogSyncService:
    """Mirror registry catalogs into repository and tag rows."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        config: CatalogSyncConfig | None = None,
        client_factory: CatalogClientFactory | None = None,
        logger: SupportsLog | None = None,
    ) -> None:
        """Configure the service.

        Parameters
        ----------
        session_factory
            Factory for the per-repository reconciliation transactions.
        config
            Catalog API settings; read from the environment when omitted.
        client_factory
            Builds a catalog client for a hostname; tests inject clients
            backed by ``httpx.MockTransport``.
        logger
            Destination for sync progress events.

        """
        self._session_factory = session_factory
        self._config = config or CatalogSyncConfig.from_env()
        self._client_factory = client_factory or self._default_client
        self._logger = logger if logger is not None else get_logger(__name__)
        self._resolver = NamespaceResolver()
        self._reconciler = RepositoryReconciler()

    def _default_client(self, hostname: str) -> RegistryCatalogClient:
        return RegistryCatalogClient(hostname, self._config)

    async def create_or_update(
        self,
        hostname: str,
        descriptor: RepositoryDescriptor | cabc.Mapping[str, typ.Any],
    ) -> RepositoryInfo | None:
        """Make one repository's tags match ``descriptor``.

        Parameters
        ----------
        hostname
            Registry the repository belongs to.
        descriptor
            ``{"name": ..., "tags": [...]}`` where ``name`` may carry a
            namespace prefix and ``tags`` lists every upstream tag.

        Returns
        -------
        RepositoryInfo | None
            The reconciled repository with its tags, or ``None`` when the
            named namespace is not provisioned.

        Raises
        ------
        RegistryNotFoundError
            If ``hostname`` is not a registered registry.

        """
        if not isinstance(descriptor, RepositoryDescriptor):
            descriptor = msgspec.convert(descriptor, type=RepositoryDescriptor)

        async with self._session_factory() as session, session.begin():
            registry = await registry_by_hostname(session, hostname)
            if registry is None:
                raise RegistryNotFoundError(hostname)
            try:
                namespace, name = await self._resolver.resolve(
                    session, registry, descriptor.name
                )
            except UnknownNamespaceError:
                return None

            reconciliation = await self._reconciler.reconcile_tags(
                session, namespace, name, descriptor.tag_names
            )
            tags = await tags_of(session, reconciliation.repository.id)
            return to_repository_info(reconciliation.repository, namespace, tags)

    async def sync_registry(self, hostname: str) -> CatalogSyncResult:
        """Reconcile every repository the registry's catalog lists.

        Raises
        ------
        RegistryNotFoundError
            If ``hostname`` is not a registered registry.
        RegistryAPIError
            If the registry answers with an HTTP error.

        """
        async with self._session_factory() as session:
            if await registry_by_hostname(session, hostname) is None:
                raise RegistryNotFoundError(hostname)

        log_info(
            self._logger, "[%s] hostname=%s", CatalogSyncEventType.SYNC_STARTED, hostname
        )
        synced = 0
        skipped = 0
        client = self._client_factory(hostname)
        try:
            async for name in client.iter_repositories():
                descriptor = await client.list_tags(name)
                if await self.create_or_update(hostname, descriptor) is None:
                    skipped += 1
                    log_info(
                        self._logger,
                        "[%s] hostname=%s repository=%s reason=unknown_namespace",
                        CatalogSyncEventType.REPOSITORY_SKIPPED,
                        hostname,
                        name,
                    )
                else:
                    synced += 1
        finally:
            await client.aclose()

        log_info(
            self._logger,
            "[%s] hostname=%s repositories_synced=%d repositories_skipped=%d",
            CatalogSyncEventType.SYNC_COMPLETED,
            hostname,
            synced,
            skipped,
        )
        return CatalogSyncResult(
            hostname=hostname,
            repositories_synced=synced,
            repositories_skipped=skipped,
        )
