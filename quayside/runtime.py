"""Quayside service process.

Granian serves ``quayside.runtime:create_app`` as an ASGI factory. A
registry's ``notifications.endpoints`` entry points at
``http://<quayside>/v2/webhooks/events``; every delivery is reconciled into
the database named by ``QUAYSIDE_DATABASE_URL``. Without that variable the
process only answers ``/health`` and ``/ready``, which lets the container
pass its probes while the database is still being provisioned.

Environment
-----------
``QUAYSIDE_HOST``
    Interface Granian binds (``0.0.0.0``).
``QUAYSIDE_PORT``
    TCP port registries deliver notifications to (``8080``).
``QUAYSIDE_LOG_LEVEL``
    femtologging level name (``INFO``).
``QUAYSIDE_DATABASE_URL``
    SQLAlchemy async URL; enables the webhook and listing endpoints.
"""

from __future__ import annotations

import os
import typing as typ

from quayside.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

_PORT_RANGE = range(1, 65536)


def _parse_port(raw_port: str) -> int:
    """Return ``raw_port`` as a listen port, exiting with status 1 if invalid."""
    port = int(raw_port) if raw_port.isdecimal() else None
    if port not in _PORT_RANGE:
        log_error(
            logger,
            "QUAYSIDE_PORT must be an integer between %d and %d, got %r",
            _PORT_RANGE.start,
            _PORT_RANGE.stop - 1,
            raw_port,
        )
        raise SystemExit(1)
    return typ.cast("int", port)


def create_app() -> falcon.asgi.App:
    """Build the ASGI app for the current environment.

    Returns
    -------
    falcon.asgi.App
        App accepting registry notifications when ``QUAYSIDE_DATABASE_URL``
        is set; otherwise a probe-only app.

    """
    from quayside.api.app import AppDependencies
    from quayside.api.app import create_app as build_api

    database_url = os.environ.get("QUAYSIDE_DATABASE_URL")
    if not database_url:
        log_warning(
            logger, "QUAYSIDE_DATABASE_URL unset; registry notifications disabled"
        )
        return build_api()

    from sqlalchemy.ext.asyncio import async_sessionmaker

    from quayside.ingestion.pipeline import PushEventProcessor
    from quayside.registry.engine import create_database_engine

    session_factory = async_sessionmaker(
        create_database_engine(database_url), expire_on_commit=False
    )
    return build_api(
        AppDependencies(
            session_factory=session_factory,
            processor=PushEventProcessor(session_factory),
        )
    )


def main() -> None:
    """Run the notification receiver under Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("QUAYSIDE_HOST", "0.0.0.0")  # noqa: S104 - container bind
    port = _parse_port(os.environ.get("QUAYSIDE_PORT", "8080"))
    requested_level = os.environ.get("QUAYSIDE_LOG_LEVEL", "INFO")

    level, fell_back = configure_logging(requested_level)
    if fell_back:
        log_warning(
            logger, "Unknown QUAYSIDE_LOG_LEVEL %r; using %s", requested_level, level
        )
    log_info(logger, "Receiving registry notifications on %s:%d", host, port)

    Granian(
        "quayside.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    ).serve()


if __name__ == "__main__":
    main()
