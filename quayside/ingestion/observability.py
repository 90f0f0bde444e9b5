"""Structured log events emitted by the push-event pipeline.

Each rejection reason maps to a fixed severity: an unknown registry is an
expected condition in multi-registry deployments and logs at INFO, while a
malformed event or an unknown actor points at misconfiguration and logs at
ERROR. Dropping a push for an unprovisioned namespace is deliberately
silent and has no method here.

Usage
-----
Inject a logger to capture events in tests:

>>> event_logger = PushEventLogger(logger=recording_logger)
>>> event_logger.log_unknown_registry(UnknownRegistryError("other.test"))

"""

from __future__ import annotations

import enum
import typing as typ

from quayside.logging import get_logger, log_error, log_exception, log_info

if typ.TYPE_CHECKING:
    from quayside.events.errors import (
        MalformedEventError,
        UnknownActorError,
        UnknownRegistryError,
    )
    from quayside.events.models import PushEvent
    from quayside.logging import SupportsLog
    from quayside.registry.models import RepositoryInfo, TagInfo


class PushEventType(enum.StrEnum):
    """Structured log event types for push-event processing."""

    ACCEPTED = "push.accepted"
    REJECTED_MALFORMED = "push.rejected.malformed"
    REJECTED_UNKNOWN_REGISTRY = "push.rejected.unknown_registry"
    REJECTED_UNKNOWN_ACTOR = "push.rejected.unknown_actor"
    ACTIVITY_FAILED = "activity.record.failed"


class PushEventLogger:
    """Emit push-event outcomes on an injected femtologging logger."""

    def __init__(self, logger: SupportsLog | None = None) -> None:
        """Use ``logger`` or the module logger when none is given."""
        self._logger = logger if logger is not None else get_logger(__name__)

    def log_accepted(
        self, event: PushEvent, repository: RepositoryInfo, tag: TagInfo
    ) -> None:
        """Log an accepted push."""
        log_info(
            self._logger,
            "[%s] host=%s repository=%s tag=%s actor=%s",
            PushEventType.ACCEPTED,
            event.source_host,
            repository.full_name,
            tag.name,
            event.actor_name,
        )

    def log_malformed(self, error: MalformedEventError) -> None:
        """Log an event that is not a recognisable manifest push."""
        log_error(self._logger, "[%s] %s", PushEventType.REJECTED_MALFORMED, error)

    def log_unknown_registry(self, error: UnknownRegistryError) -> None:
        """Log an event from a registry that is not managed here."""
        log_info(
            self._logger,
            "[%s] %s",
            PushEventType.REJECTED_UNKNOWN_REGISTRY,
            error,
        )

    def log_unknown_actor(self, error: UnknownActorError) -> None:
        """Log an event pushed by an identity with no user record."""
        log_error(
            self._logger, "[%s] %s", PushEventType.REJECTED_UNKNOWN_ACTOR, error
        )

    def log_activity_failed(
        self, repository: RepositoryInfo, tag: TagInfo, error: BaseException
    ) -> None:
        """Log a failed audit write; registry state is already committed."""
        log_exception(
            self._logger,
            f"[{PushEventType.ACTIVITY_FAILED}] repository={repository.full_name} "
            f"tag={tag.name} error_type={type(error).__name__}",
            error,
        )
