"""Application factory for the Quayside Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with health endpoints and, when database dependencies are
available, the registry webhook and repository listing endpoints.

Usage
-----
Create a health-only app (no database)::

    app = create_app()

Create a full app with domain endpoints::

    from quayside.api.app import AppDependencies, create_app

    deps = AppDependencies(
        session_factory=session_factory,
        processor=PushEventProcessor(session_factory),
    )
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from quayside.api.errors import (
    InvalidInputError,
    handle_invalid_input,
    handle_registry_not_found,
)
from quayside.api.health.resources import HealthResource, ReadyResource
from quayside.registry.errors import RegistryNotFoundError

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from quayside.ingestion.pipeline import PushEventProcessor

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    When ``session_factory`` and ``processor`` are both provided, the
    application registers the webhook and listing endpoints. Otherwise only
    health endpoints are registered.

    Attributes
    ----------
    session_factory
        Async session factory for database access.
    processor
        Push-event processor that handles webhook deliveries.

    """

    session_factory: async_sessionmaker[AsyncSession] | None = None
    processor: PushEventProcessor | None = None


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None`` or incomplete,
        only ``/health`` and ``/ready`` are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    app = falcon.asgi.App()

    session_factory = dependencies.session_factory if dependencies else None
    processor = dependencies.processor if dependencies else None

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(session_factory))

    if session_factory is not None and processor is not None:
        from quayside.api.registries.resources import RegistryRepositoriesResource
        from quayside.api.webhooks.resources import RegistryEventsResource

        app.add_route("/v2/webhooks/events", RegistryEventsResource(processor))
        app.add_route(
            "/registries/{hostname}/repositories",
            RegistryRepositoriesResource(session_factory),
        )

    app.add_error_handler(RegistryNotFoundError, handle_registry_not_found)
    app.add_error_handler(InvalidInputError, handle_invalid_input)

    return app
