"""Confirm a push event originates from a managed registry and known user."""

from __future__ import annotations

import typing as typ

from quayside.events.errors import UnknownActorError, UnknownRegistryError
from quayside.registry.queries import registry_by_hostname, user_by_username

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from quayside.events.models import PushEvent
    from quayside.registry.storage import Registry, User


class OriginValidator:
    """Resolve the registry and user a push event refers to.

    The registry is checked first so that it is available to namespace
    resolution; neither lookup writes to the database.
    """

    async def validate(
        self, session: AsyncSession, event: PushEvent
    ) -> tuple[Registry, User]:
        """Return the registry and actor for ``event``.

        Raises
        ------
        UnknownRegistryError
            If no registry is registered for ``event.source_host``.
        UnknownActorError
            If no user is named ``event.actor_name``.

        """
        registry = await registry_by_hostname(session, event.source_host)
        if registry is None:
            raise UnknownRegistryError(event.source_host)

        actor = await user_by_username(session, event.actor_name)
        if actor is None:
            raise UnknownActorError(event.actor_name)

        return registry, actor
