"""Shared test utilities."""

from __future__ import annotations

import asyncio
import typing as typ

from sqlalchemy import func, select

from quayside.activity import Activity
from quayside.registry import Namespace, Repository, Tag

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

REGISTRY_HOST = "registry.test.lan"
PUSHER = "flavio"


def run_async[T](coro_func: typ.Callable[[], typ.Coroutine[typ.Any, typ.Any, T]]) -> T:
    """Execute an async callable within the test context."""
    return asyncio.run(coro_func())


def push_event(
    repository: str,
    tag: str,
    *,
    host: str = REGISTRY_HOST,
    actor: str = PUSHER,
    url: str | None = None,
) -> dict[str, typ.Any]:
    """Return a registry push event as delivered in a notification envelope."""
    return {
        "id": f"evt-{repository}-{tag}",
        "timestamp": "2024-07-01T12:00:00.000000000Z",
        "action": "push",
        "target": {
            "mediaType": "application/vnd.docker.distribution.manifest.v2+json",
            "digest": "sha256:0123456789abcdef",
            "repository": repository,
            "url": url or f"http://{REGISTRY_HOST}/v2/{repository}/manifests/{tag}",
            "tag": tag,
        },
        "request": {
            "id": "req-1",
            "addr": "10.0.0.1:5000",
            "host": host,
            "method": "PUT",
            "useragent": "docker/27.0",
        },
        "actor": {"name": actor},
    }


class StateCounts(typ.NamedTuple):
    """Row counts used to assert that rejected events change nothing."""

    namespaces: int
    repositories: int
    tags: int
    activities: int


async def count_state(
    session_factory: async_sessionmaker[AsyncSession],
) -> StateCounts:
    """Count namespaces, repositories, tags and activities."""
    async with session_factory() as session:
        counts = [
            await session.scalar(select(func.count()).select_from(model))
            for model in (Namespace, Repository, Tag, Activity)
        ]
    return StateCounts(*(count or 0 for count in counts))


class RecordingLogger:
    """Collects log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None, bool]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message, exc_info, stack_info))
        return message

    def levels(self) -> list[str]:
        """Return the level of every recorded call in order."""
        return [level for level, *_ in self.calls]

    def messages(self) -> list[str]:
        """Return every recorded message in order."""
        return [message for _, message, *_ in self.calls]
