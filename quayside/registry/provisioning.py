"""Administrative provisioning of registries, namespaces and users.

Push notifications never create registries, named namespaces or users: the
ingestion pipeline only matches rows that already exist. This service is the
flow that creates them. Every operation is idempotent, so repeating a
provisioning command returns the existing rows unchanged.

Usage
-----
Register a registry and a team namespace::

    service = RegistryProvisioningService(session_factory)
    registry = await service.create_registry("registry.example.test")
    await service.create_namespace("registry.example.test", "platform")
    await service.create_user("marina", email="marina@example.test")

"""

from __future__ import annotations

import typing as typ

from quayside.registry.errors import RegistryNotFoundError, ReservedNamespaceError
from quayside.registry.mapping import (
    to_namespace_info,
    to_registry_info,
    to_user_info,
)
from quayside.registry.queries import registry_by_hostname
from quayside.registry.storage import Namespace, Registry, User
from quayside.registry.upsert import find_or_create

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from quayside.registry.models import NamespaceInfo, RegistryInfo, UserInfo

type SessionFactory = async_sessionmaker[AsyncSession]


class RegistryProvisioningService:
    """Create the registry state that push events are matched against.

    Parameters
    ----------
    session_factory:
        Async session factory for the registry database.

    """

    def __init__(self, session_factory: SessionFactory) -> None:
        """Store the session factory used for provisioning transactions."""
        self._session_factory = session_factory

    async def create_registry(self, hostname: str) -> RegistryInfo:
        """Register ``hostname`` together with its global namespace.

        The global namespace is named after the hostname; the
        ``(registry, name)`` unique constraint keeps it single.
        """
        async with self._session_factory() as session, session.begin():
            registry, _ = await find_or_create(session, Registry, hostname=hostname)
            global_namespace, _ = await find_or_create(
                session,
                Namespace,
                registry_id=registry.id,
                name=hostname,
                defaults={"is_global": True},
            )
            return to_registry_info(registry, global_namespace)

    async def create_namespace(
        self, hostname: str, name: str, *, description: str = ""
    ) -> NamespaceInfo:
        """Provision the named namespace ``name`` on the registry ``hostname``.

        Raises
        ------
        RegistryNotFoundError
            If ``hostname`` has not been registered.
        ReservedNamespaceError
            If ``name`` is the registry's global namespace name or contains
            a ``/``.

        """
        if name == hostname or "/" in name or not name:
            raise ReservedNamespaceError(hostname, name)

        async with self._session_factory() as session, session.begin():
            registry = await self._require_registry(session, hostname)
            namespace, _ = await find_or_create(
                session,
                Namespace,
                registry_id=registry.id,
                name=name,
                defaults={"is_global": False, "description": description},
            )
            return to_namespace_info(namespace)

    async def create_user(self, username: str, *, email: str | None = None) -> UserInfo:
        """Register ``username`` as a known pushing identity."""
        async with self._session_factory() as session, session.begin():
            user, _ = await find_or_create(
                session, User, username=username, defaults={"email": email}
            )
            return to_user_info(user)

    @staticmethod
    async def _require_registry(session: AsyncSession, hostname: str) -> Registry:
        registry = await registry_by_hostname(session, hostname)
        if registry is None:
            raise RegistryNotFoundError(hostname)
        return registry
