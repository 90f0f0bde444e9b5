"""Read-only view of the repositories Quayside tracks for a registry."""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from quayside.registry.errors import RegistryNotFoundError
from quayside.registry.mapping import to_repository_info
from quayside.registry.queries import (
    namespaces_of,
    registry_by_hostname,
    repositories_in,
    tags_of,
)

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from quayside.registry.models import RepositoryInfo

__all__ = ["RegistryRepositoriesResource"]


def _serialize_repository(repository: RepositoryInfo) -> dict[str, typ.Any]:
    return {
        "name": repository.full_name,
        "created_at": repository.created_at.isoformat(),
        "updated_at": repository.updated_at.isoformat(),
        "tags": list(repository.tag_names),
    }


class RegistryRepositoriesResource:
    """Handle ``GET /registries/{hostname}/repositories``."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Store the session factory used for lookups."""
        self._session_factory = session_factory

    async def _load(self, hostname: str) -> list[RepositoryInfo]:
        async with self._session_factory() as session:
            registry = await registry_by_hostname(session, hostname)
            if registry is None:
                raise RegistryNotFoundError(hostname)

            repositories: list[RepositoryInfo] = []
            for namespace in await namespaces_of(session, registry):
                for repository in await repositories_in(session, namespace):
                    tags = await tags_of(session, repository.id)
                    repositories.append(
                        to_repository_info(repository, namespace, tags)
                    )
            return repositories

    async def on_get(self, _req: Request, resp: Response, hostname: str) -> None:
        """List repositories and tags of ``hostname``.

        Raises
        ------
        RegistryNotFoundError
            If ``hostname`` is not registered; rendered as HTTP 404.

        """
        repositories = await self._load(hostname)
        resp.media = {
            "registry": hostname,
            "repositories": [_serialize_repository(repo) for repo in repositories],
        }
        resp.status = HTTPStatus.OK
