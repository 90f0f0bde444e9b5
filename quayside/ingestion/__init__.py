"""Push-event ingestion pipeline."""

from __future__ import annotations

from .namespaces import NamespaceResolver
from .observability import PushEventLogger, PushEventType
from .outcome import PushEventResult
from .pipeline import PushEventProcessor
from .reconciler import RepositoryReconciler, TagReconciliation
from .validation import OriginValidator

__all__ = [
    "NamespaceResolver",
    "OriginValidator",
    "PushEventLogger",
    "PushEventProcessor",
    "PushEventResult",
    "PushEventType",
    "RepositoryReconciler",
    "TagReconciliation",
]
