"""Liveness and readiness probes.

``/health`` never touches the database. ``/ready`` pings the database with
``SELECT 1`` when a session factory is configured so that orchestrators stop
routing webhook traffic to an instance that cannot persist it.
"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from quayside.logging import get_logger, log_warning

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

__all__ = ["HealthResource", "ReadyResource"]

logger = get_logger(__name__)


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource.

    Responds ``{"status": "ready"}`` when the process can serve traffic and
    ``503 {"status": "unavailable"}`` when the configured database does not
    answer.
    """

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession] | None = None
    ) -> None:
        """Store the optional session factory used for the database ping."""
        self._session_factory = session_factory

    async def _database_reachable(self) -> bool:
        if self._session_factory is None:
            return True
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            log_warning(logger, "Readiness check failed: %s", exc)
            return False
        return True

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with readiness status.

        """
        if await self._database_reachable():
            resp.media = {"status": "ready"}
            resp.status = HTTPStatus.OK
        else:
            resp.media = {"status": "unavailable"}
            resp.status = HTTPStatus.SERVICE_UNAVAILABLE
