"""Unit tests for CatalogSyncService."""

from __future__ import annotations

import typing as typ

import httpx
import pytest

from quayside.catalog import (
    CatalogSyncConfig,
    CatalogSyncResult,
    CatalogSyncService,
    RegistryCatalogClient,
    RepositoryDescriptor,
)
from quayside.registry import RegistryNotFoundError
from tests.helpers import REGISTRY_HOST, RecordingLogger, count_state

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from quayside.ingestion import PushEventProcessor
    from quayside.registry import RegistryProvisioningService
    from tests.unit.conftest import ProvisionedRegistry


def _fake_registry(catalog: dict[str, list[str] | None]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/v2/_catalog":
            return httpx.Response(200, json={"repositories": list(catalog)})
        name = path.removeprefix("/v2/").removesuffix("/tags/list")
        if name not in catalog:
            return httpx.Response(404)
        return httpx.Response(200, json={"name": name, "tags": catalog[name]})

    return httpx.MockTransport(handler)


def _service(
    session_factory: async_sessionmaker[AsyncSession],
    catalog: dict[str, list[str] | None],
    logger: RecordingLogger | None = None,
) -> CatalogSyncService:
    config = CatalogSyncConfig()

    def client_factory(hostname: str) -> RegistryCatalogClient:
        return RegistryCatalogClient(
            hostname,
            config,
            http_client=httpx.AsyncClient(transport=_fake_registry(catalog)),
        )

    return CatalogSyncService(
        session_factory,
        config=config,
        client_factory=client_factory,
        logger=logger or RecordingLogger(),
    )


@pytest.mark.asyncio
async def test_create_or_update_accepts_mapping_descriptor(
    session_factory: async_sessionmaker[AsyncSession],
    provisioned: ProvisionedRegistry,
) -> None:
    """Plain {name, tags} mappings are reconciled like descriptors."""
    service = _service(session_factory, {})

    repository = await service.create_or_update(
        REGISTRY_HOST, {"name": "busybox", "tags": ["1.0.0", "latest"]}
    )

    assert repository is not None
    assert repository.full_name == "busybox"
    assert repository.tag_names == ("1.0.0", "latest")


@pytest.mark.asyncio
async def test_create_or_update_set_law(
    session_factory: async_sessionmaker[AsyncSession],
    provisioned: ProvisionedRegistry,
) -> None:
    """Repeating a list is a no-op; a subset deletes the missing tags."""
    service = _service(session_factory, {})
    full = RepositoryDescriptor(name="busybox", tags=["1.0.0", "1.0.1", "latest"])

    first = await service.create_or_update(REGISTRY_HOST, full)
    again = await service.create_or_update(REGISTRY_HOST, full)
    subset = await service.create_or_update(
        REGISTRY_HOST, RepositoryDescriptor(name="busybox", tags=["latest"])
    )

    assert first is not None
    assert again is not None
    assert subset is not None
    assert set(again.tag_names) == set(first.tag_names)
    assert again.id == first.id
    assert subset.tag_names == ("latest",)
    assert (await count_state(session_factory)).repositories == 1


@pytest.mark.asyncio
async def test_create_or_update_keeps_pushed_tag_author(
    session_factory: async_sessionmaker[AsyncSession],
    provisioned: ProvisionedRegistry,
    processor: PushEventProcessor,
) -> None:
    """Tags already pushed keep their author after a bulk sync."""
    from tests.helpers import push_event

    pushed = await processor.process_push_event(push_event("busybox", "latest"))
    service = _service(session_factory, {})

    repository = await service.create_or_update(
        REGISTRY_HOST, {"name": "busybox", "tags": ["latest", "edge"]}
    )

    assert pushed.tag is not None
    assert repository is not None
    by_name = {tag.name: tag for tag in repository.tags}
    assert by_name["latest"].id == pushed.tag.id
    assert by_name["latest"].author_id == provisioned.user.id
    assert by_name["edge"].author_id is None


@pytest.mark.asyncio
async def test_create_or_update_skips_unknown_namespace(
    session_factory: async_sessionmaker[AsyncSession],
    provisioned: ProvisionedRegistry,
) -> None:
    """Unprovisioned namespaces yield None and no rows."""
    service = _service(session_factory, {})

    result = await service.create_or_update(
        REGISTRY_HOST, {"name": "ghost/busybox", "tags": ["latest"]}
    )

    assert result is None
    assert (await count_state(session_factory)).repositories == 0


@pytest.mark.asyncio
async def test_create_or_update_requires_registry(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Unknown hostnames are an error on the bulk path."""
    service = _service(session_factory, {})

    with pytest.raises(RegistryNotFoundError):
        await service.create_or_update("unknown.test", {"name": "busybox", "tags": []})


@pytest.mark.asyncio
async def test_sync_registry_reconciles_catalog(
    session_factory: async_sessionmaker[AsyncSession],
    provisioned: ProvisionedRegistry,
    provisioning: RegistryProvisioningService,
) -> None:
    """Every catalog entry is synced except unprovisioned namespaces."""
    await provisioning.create_namespace(REGISTRY_HOST, "team")
    logger = RecordingLogger()
    service = _service(
        session_factory,
        {
            "busybox": ["1.0.0", "latest"],
            "team/alpine": ["3.20"],
            "ghost/nginx": ["1.27"],
            "empty": None,
        },
        logger,
    )

    result = await service.sync_registry(REGISTRY_HOST)

    assert result == CatalogSyncResult(
        hostname=REGISTRY_HOST, repositories_synced=3, repositories_skipped=1
    )
    counts = await count_state(session_factory)
    assert (counts.repositories, counts.tags) == (3, 3)
    messages = logger.messages()
    assert messages[0].startswith("[catalog.sync.started]")
    assert any(
        m.startswith("[catalog.sync.skipped]") and "ghost/nginx" in m
        for m in messages
    )
    assert messages[-1].startswith("[catalog.sync.completed]")


@pytest.mark.asyncio
async def test_sync_registry_requires_registered_host(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Syncing an unknown registry fails before any HTTP call."""

    def client_factory(_hostname: str) -> RegistryCatalogClient:
        pytest.fail("no client should be built for unknown registries")

    service = CatalogSyncService(
        session_factory,
        config=CatalogSyncConfig(),
        client_factory=client_factory,
        logger=RecordingLogger(),
    )

    with pytest.raises(RegistryNotFoundError):
        await service.sync_registry("unknown.test")
