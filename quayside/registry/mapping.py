"""Mapping helpers from registry rows to DTOs."""

from __future__ import annotations

import typing as typ

from quayside.registry.models import (
    NamespaceInfo,
    RegistryInfo,
    RepositoryInfo,
    TagInfo,
    UserInfo,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from quayside.registry.storage import Namespace, Registry, Repository, Tag, User


def to_tag_info(tag: Tag) -> TagInfo:
    """Convert a tag row to a TagInfo DTO."""
    return TagInfo(
        id=tag.id,
        name=tag.name,
        author_id=tag.author_id,
        created_at=tag.created_at,
    )


def to_repository_info(
    repository: Repository,
    namespace: Namespace,
    tags: cabc.Iterable[Tag] = (),
) -> RepositoryInfo:
    """Convert a repository row and its ordered tags to a RepositoryInfo DTO.

    Parameters
    ----------
    repository
        Repository row.
    namespace
        Namespace owning ``repository``; global namespaces map to an
        unprefixed name.
    tags
        Tags of the repository in the order callers should see them.

    Returns
    -------
    RepositoryInfo
        Repository information detached from the session.

    """
    return RepositoryInfo(
        id=repository.id,
        namespace_id=namespace.id,
        namespace_name=None if namespace.is_global else namespace.name,
        name=repository.name,
        created_at=repository.created_at,
        updated_at=repository.updated_at,
        tags=tuple(to_tag_info(tag) for tag in tags),
    )


def to_namespace_info(namespace: Namespace) -> NamespaceInfo:
    """Convert a namespace row to a NamespaceInfo DTO."""
    return NamespaceInfo(
        id=namespace.id,
        registry_id=namespace.registry_id,
        name=namespace.name,
        is_global=namespace.is_global,
    )


def to_registry_info(registry: Registry, global_namespace: Namespace) -> RegistryInfo:
    """Convert a registry row and its global namespace to a RegistryInfo DTO."""
    return RegistryInfo(
        id=registry.id,
        hostname=registry.hostname,
        global_namespace=to_namespace_info(global_namespace),
    )


def to_user_info(user: User) -> UserInfo:
    """Convert a user row to a UserInfo DTO."""
    return UserInfo(id=user.id, username=user.username, email=user.email)
