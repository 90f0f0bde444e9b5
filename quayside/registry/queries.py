"""Data-access helpers for registry state.

Every traversal the ingestion pipeline performs goes through one of these
functions rather than lazy ORM relationships, which async sessions cannot
load implicitly. Sequences are ordered by ``(created_at, id)`` so callers see
rows in the order they were first recorded.
"""

from __future__ import annotations

import typing as typ

from sqlalchemy import select

from quayside.registry.storage import Namespace, Registry, Repository, Tag, User

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def registry_by_hostname(session: AsyncSession, hostname: str) -> Registry | None:
    """Return the registry registered for ``hostname``."""
    return await session.scalar(select(Registry).where(Registry.hostname == hostname))


async def user_by_username(session: AsyncSession, username: str) -> User | None:
    """Return the user named ``username``."""
    return await session.scalar(select(User).where(User.username == username))


async def global_namespace_of(
    session: AsyncSession, registry: Registry
) -> Namespace | None:
    """Return the global namespace owned by ``registry``."""
    return await session.scalar(
        select(Namespace).where(
            Namespace.registry_id == registry.id,
            Namespace.is_global.is_(True),
        )
    )


async def namespace_by_name(
    session: AsyncSession, registry: Registry, name: str
) -> Namespace | None:
    """Return the provisioned, non-global namespace ``name`` of ``registry``."""
    return await session.scalar(
        select(Namespace).where(
            Namespace.registry_id == registry.id,
            Namespace.name == name,
            Namespace.is_global.is_(False),
        )
    )


async def repository_by_namespace_and_name(
    session: AsyncSession, namespace: Namespace, name: str
) -> Repository | None:
    """Return the repository ``name`` inside ``namespace``."""
    return await session.scalar(
        select(Repository).where(
            Repository.namespace_id == namespace.id,
            Repository.name == name,
        )
    )


async def tags_of(session: AsyncSession, repository_id: int) -> list[Tag]:
    """Return the tags of a repository, oldest first."""
    tags = await session.scalars(
        select(Tag)
        .where(Tag.repository_id == repository_id)
        .order_by(Tag.created_at, Tag.id)
    )
    return list(tags)


async def repositories_in(session: AsyncSession, namespace: Namespace) -> list[Repository]:
    """Return the repositories of ``namespace``, oldest first."""
    repositories = await session.scalars(
        select(Repository)
        .where(Repository.namespace_id == namespace.id)
        .order_by(Repository.created_at, Repository.id)
    )
    return list(repositories)


async def namespaces_of(session: AsyncSession, registry: Registry) -> list[Namespace]:
    """Return every namespace of ``registry``, the global one first."""
    namespaces = await session.scalars(
        select(Namespace)
        .where(Namespace.registry_id == registry.id)
        .order_by(Namespace.is_global.desc(), Namespace.created_at, Namespace.id)
    )
    return list(namespaces)
