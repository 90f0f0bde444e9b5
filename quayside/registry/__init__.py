"""Registry state: storage, data access and provisioning.

The registry package owns the persisted view of every registry Quayside
manages:

- SQLAlchemy models for registries, namespaces, repositories, tags and users
- Explicit query helpers used by the ingestion pipeline
- The ``find_or_create`` primitive that keeps concurrent writers convergent
- The provisioning service administrators use to register hosts, namespaces
  and users before pushes can be accepted

Usage
-----
Provision a registry and inspect a repository::

    from quayside.registry import RegistryProvisioningService

    service = RegistryProvisioningService(session_factory)
    await service.create_registry("registry.example.test")

"""

from quayside.registry.engine import create_database_engine
from quayside.registry.errors import (
    ConcurrentWriteError,
    GlobalNamespaceMissingError,
    RegistryError,
    RegistryNotFoundError,
    ReservedNamespaceError,
)
from quayside.registry.models import (
    NamespaceInfo,
    RegistryInfo,
    RepositoryInfo,
    TagInfo,
    UserInfo,
)
from quayside.registry.provisioning import RegistryProvisioningService
from quayside.registry.storage import (
    Namespace,
    Registry,
    Repository,
    Tag,
    User,
    init_registry_storage,
)
from quayside.registry.upsert import find_or_create

__all__ = [
    "ConcurrentWriteError",
    "GlobalNamespaceMissingError",
    "Namespace",
    "NamespaceInfo",
    "Registry",
    "RegistryError",
    "RegistryInfo",
    "RegistryNotFoundError",
    "RegistryProvisioningService",
    "Repository",
    "RepositoryInfo",
    "ReservedNamespaceError",
    "Tag",
    "TagInfo",
    "User",
    "UserInfo",
    "create_database_engine",
    "find_or_create",
    "init_registry_storage",
]
