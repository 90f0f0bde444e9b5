"""Data transfer objects returned by registry services."""

from __future__ import annotations

import dataclasses
import typing as typ

from quayside.common.paths import qualified_repository_name

if typ.TYPE_CHECKING:
    import datetime as dt


@dataclasses.dataclass(slots=True, frozen=True)
class TagInfo:
    """Detached view of a tag row."""

    id: int
    name: str
    author_id: int | None
    created_at: dt.datetime


@dataclasses.dataclass(slots=True, frozen=True)
class RepositoryInfo:
    """Detached view of a repository and its tags.

    ``namespace_name`` is ``None`` for repositories in a registry's global
    namespace, matching how registries address them without a prefix.
    """

    id: int
    namespace_id: int
    namespace_name: str | None
    name: str
    created_at: dt.datetime
    updated_at: dt.datetime
    tags: tuple[TagInfo, ...] = ()

    @property
    def full_name(self) -> str:
        """Return the path the registry uses for this repository."""
        return qualified_repository_name(self.namespace_name, self.name)

    @property
    def tag_names(self) -> tuple[str, ...]:
        """Return tag names in creation order."""
        return tuple(tag.name for tag in self.tags)


@dataclasses.dataclass(slots=True, frozen=True)
class NamespaceInfo:
    """Detached view of a namespace row."""

    id: int
    registry_id: int
    name: str
    is_global: bool


@dataclasses.dataclass(slots=True, frozen=True)
class RegistryInfo:
    """Detached view of a registry and its global namespace."""

    id: int
    hostname: str
    global_namespace: NamespaceInfo


@dataclasses.dataclass(slots=True, frozen=True)
class UserInfo:
    """Detached view of a user row."""

    id: int
    username: str
    email: str | None
