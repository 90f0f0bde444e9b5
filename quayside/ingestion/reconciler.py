"""Create-or-update engine for repositories and their tags.

Two entry points share the same ``find_or_create`` core:

- ``reconcile_push`` handles a single pushed tag. It only ever adds rows and
  attributes a tag to the user who first pushed that name.
- ``reconcile_tags`` mirrors a complete upstream tag list. It creates
  missing tags without an author and deletes tags the upstream no longer
  lists.

Both operate inside the caller's transaction so that a repository is never
persisted without the tag that caused it to be created.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from quayside.common.time import utcnow
from quayside.registry.queries import tags_of
from quayside.registry.storage import Repository, Tag
from quayside.registry.upsert import find_or_create

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sqlalchemy.ext.asyncio import AsyncSession

    from quayside.registry.storage import Namespace, User


@dc.dataclass(frozen=True, slots=True)
class TagReconciliation:
    """Rows touched by a bulk tag reconciliation."""

    repository: Repository
    created: tuple[str, ...]
    deleted: tuple[str, ...]


class RepositoryReconciler:
    """Idempotently map pushes and tag lists onto repository state."""

    async def _repository(
        self, session: AsyncSession, namespace: Namespace, name: str
    ) -> Repository:
        repository, _ = await find_or_create(
            session, Repository, namespace_id=namespace.id, name=name
        )
        return repository

    async def reconcile_push(
        self,
        session: AsyncSession,
        namespace: Namespace,
        repository_name: str,
        tag_name: str,
        author: User,
    ) -> tuple[Repository, Tag]:
        """Ensure ``repository_name:tag_name`` exists inside ``namespace``.

        The author is recorded only when the tag row is created; re-pushing
        an existing tag name keeps the original attribution.

        Returns
        -------
        tuple[Repository, Tag]
            The repository and the tag named by the push.

        """
        repository = await self._repository(session, namespace, repository_name)
        tag, created = await find_or_create(
            session,
            Tag,
            defaults={"author_id": author.id},
            repository_id=repository.id,
            name=tag_name,
        )
        if created:
            repository.updated_at = utcnow()
            await session.flush()
        return repository, tag

    async def reconcile_tags(
        self,
        session: AsyncSession,
        namespace: Namespace,
        repository_name: str,
        tag_names: cabc.Iterable[str],
    ) -> TagReconciliation:
        """Make the repository's tags equal to ``tag_names``.

        Parameters
        ----------
        session
            Session whose transaction receives the changes.
        namespace
            Namespace owning the repository.
        repository_name
            Bare repository name inside ``namespace``.
        tag_names
            Every tag that currently exists upstream. Duplicates are ignored.

        Returns
        -------
        TagReconciliation
            The repository plus the names of created and deleted tags.

        """
        repository = await self._repository(session, namespace, repository_name)
        wanted = dict.fromkeys(tag_names)
        existing = {tag.name: tag for tag in await tags_of(session, repository.id)}

        created: list[str] = []
        for name in wanted:
            if name in existing:
                continue
            _, was_created = await find_or_create(
                session, Tag, repository_id=repository.id, name=name
            )
            if was_created:
                created.append(name)

        deleted: list[str] = []
        for name, tag in existing.items():
            if name not in wanted:
                await session.delete(tag)
                deleted.append(name)

        if created or deleted:
            repository.updated_at = utcnow()
        await session.flush()
        return TagReconciliation(
            repository=repository, created=tuple(created), deleted=tuple(deleted)
        )
