"""Administrative commands for provisioning Quayside state.

Pushes are only accepted for registries, namespaces and users that already
exist. ``quayside-admin`` creates them, initialises the schema and runs
catalog synchronisation on demand.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import typing as typ

from sqlalchemy.ext.asyncio import async_sessionmaker

from quayside.activity.storage import init_activity_storage
from quayside.catalog.errors import RegistryAPIError, RegistryResponseShapeError
from quayside.catalog.sync import CatalogSyncService
from quayside.registry.engine import create_database_engine
from quayside.registry.errors import RegistryError
from quayside.registry.provisioning import RegistryProvisioningService
from quayside.registry.storage import init_registry_storage

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

_DOMAIN_ERRORS = (RegistryError, RegistryAPIError, RegistryResponseShapeError)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quayside-admin", description=__doc__)
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy async URL (defaults to QUAYSIDE_DATABASE_URL)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create database tables")

    registry = commands.add_parser("add-registry", help="Register a registry host")
    registry.add_argument("hostname")

    namespace = commands.add_parser("add-namespace", help="Provision a namespace")
    namespace.add_argument("hostname")
    namespace.add_argument("name")
    namespace.add_argument("--description", default="")

    user = commands.add_parser("add-user", help="Create a pushing user")
    user.add_argument("username")
    user.add_argument("--email", default=None)

    sync = commands.add_parser("sync-catalog", help="Mirror a registry's catalog")
    sync.add_argument("hostname")
    return parser


async def _init_db(engine: AsyncEngine) -> str:
    await init_registry_storage(engine)
    await init_activity_storage(engine)
    return "database initialised"


async def _run(args: argparse.Namespace, engine: AsyncEngine) -> str:
    session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
        engine, expire_on_commit=False
    )
    provisioning = RegistryProvisioningService(session_factory)

    match args.command:
        case "init-db":
            return await _init_db(engine)
        case "add-registry":
            registry = await provisioning.create_registry(args.hostname)
            return f"registry {registry.hostname} (id={registry.id})"
        case "add-namespace":
            namespace = await provisioning.create_namespace(
                args.hostname, args.name, description=args.description
            )
            return f"namespace {namespace.name} (id={namespace.id})"
        case "add-user":
            user = await provisioning.create_user(args.username, email=args.email)
            return f"user {user.username} (id={user.id})"
        case "sync-catalog":
            result = await CatalogSyncService(session_factory).sync_registry(
                args.hostname
            )
            return (
                f"registry {result.hostname}: "
                f"{result.repositories_synced} repositories synced, "
                f"{result.repositories_skipped} skipped"
            )
    msg = f"unknown command: {args.command}"
    raise AssertionError(msg)


async def _run_with_engine(args: argparse.Namespace, database_url: str) -> str:
    engine = create_database_engine(database_url)
    try:
        return await _run(args, engine)
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    """Run one administrative command.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when the command fails.

    """
    args = _build_parser().parse_args(argv)
    database_url = args.database_url or os.environ.get("QUAYSIDE_DATABASE_URL")
    if not database_url:
        print("QUAYSIDE_DATABASE_URL or --database-url is required")
        return 1

    try:
        message = asyncio.run(_run_with_engine(args, database_url))
    except _DOMAIN_ERRORS as exc:
        print(f"error: {exc}")
        return 1

    print(message)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
