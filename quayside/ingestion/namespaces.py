"""Map repository paths onto namespaces of a registry."""

from __future__ import annotations

import typing as typ

from quayside.common.paths import split_repository_path
from quayside.events.errors import UnknownNamespaceError
from quayside.registry.errors import GlobalNamespaceMissingError
from quayside.registry.queries import global_namespace_of, namespace_by_name

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from quayside.registry.storage import Namespace, Registry


class NamespaceResolver:
    """Resolve ``[namespace/]name`` paths without creating namespaces.

    Unprefixed paths land in the registry's global namespace, which is
    created alongside the registry. Prefixed paths only resolve when the
    named namespace was provisioned beforehand: pushing to an unknown team
    namespace never creates it.
    """

    async def resolve(
        self, session: AsyncSession, registry: Registry, repository_path: str
    ) -> tuple[Namespace, str]:
        """Return the namespace and bare repository name for a path.

        Parameters
        ----------
        session
            Session used for the lookups.
        registry
            Registry the path belongs to.
        repository_path
            Path such as ``busybox`` or ``team/busybox``; only the first
            ``/`` separates the namespace.

        Returns
        -------
        tuple[Namespace, str]
            The owning namespace and the repository name inside it.

        Raises
        ------
        UnknownNamespaceError
            If the path names a namespace that is not provisioned.

        """
        namespace_name, name = split_repository_path(repository_path)

        if namespace_name is None:
            namespace = await global_namespace_of(session, registry)
            if namespace is None:
                raise GlobalNamespaceMissingError(registry.hostname)
            return namespace, name

        namespace = await namespace_by_name(session, registry, namespace_name)
        if namespace is None:
            raise UnknownNamespaceError(namespace_name)
        return namespace, name
