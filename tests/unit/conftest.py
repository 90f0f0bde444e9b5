"""Unit-test fixtures for registry state and the push-event pipeline."""

from __future__ import annotations

import dataclasses
import typing as typ

import pytest
import pytest_asyncio

from quayside.ingestion import PushEventLogger, PushEventProcessor
from quayside.registry import RegistryProvisioningService
from tests.helpers import PUSHER, REGISTRY_HOST, RecordingLogger

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from quayside.registry import RegistryInfo, UserInfo


@dataclasses.dataclass(frozen=True, slots=True)
class ProvisionedRegistry:
    """Registry and pushing user created before a test runs."""

    registry: RegistryInfo
    user: UserInfo


@pytest.fixture
def provisioning(
    session_factory: async_sessionmaker[AsyncSession],
) -> RegistryProvisioningService:
    """Return a provisioning service bound to the test database."""
    return RegistryProvisioningService(session_factory)


@pytest_asyncio.fixture
async def provisioned(
    provisioning: RegistryProvisioningService,
) -> ProvisionedRegistry:
    """Register the test registry host and the pushing user."""
    registry = await provisioning.create_registry(REGISTRY_HOST)
    user = await provisioning.create_user(PUSHER, email="flavio@example.test")
    return ProvisionedRegistry(registry=registry, user=user)


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Return a logger that records every call."""
    return RecordingLogger()


@pytest.fixture
def processor(
    session_factory: async_sessionmaker[AsyncSession],
    recording_logger: RecordingLogger,
) -> PushEventProcessor:
    """Return a processor whose outcome logs are recorded."""
    return PushEventProcessor(
        session_factory, event_logger=PushEventLogger(logger=recording_logger)
    )
