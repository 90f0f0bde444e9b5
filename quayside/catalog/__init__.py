"""Out-of-band synchronisation with registry v2 catalog APIs."""

from __future__ import annotations

from .client import RegistryCatalogClient, RepositoryDescriptor
from .config import CatalogSyncConfig
from .errors import RegistryAPIError, RegistryResponseShapeError
from .sync import CatalogSyncEventType, CatalogSyncResult, CatalogSyncService

__all__ = [
    "CatalogSyncConfig",
    "CatalogSyncEventType",
    "CatalogSyncResult",
    "CatalogSyncService",
    "RegistryAPIError",
    "RegistryCatalogClient",
    "RegistryResponseShapeError",
    "RepositoryDescriptor",
]
