"""Reasons a registry push event produces no state change."""

from __future__ import annotations

import enum


class PushOutcome(enum.StrEnum):
    """Machine-readable result of processing one registry event."""

    ACCEPTED = "accepted"
    IGNORED = "ignored"
    MALFORMED_EVENT = "malformed_event"
    UNKNOWN_REGISTRY = "unknown_registry"
    UNKNOWN_ACTOR = "unknown_actor"
    UNKNOWN_NAMESPACE = "unknown_namespace"


class PushEventRejectedError(Exception):
    """Base class for events rejected before any state is written."""

    outcome: PushOutcome

    def __init__(self, message: str) -> None:
        """Store the human-readable rejection message."""
        super().__init__(message)


class MalformedEventError(PushEventRejectedError):
    """Raised when an event does not have the shape of a manifest push."""

    outcome = PushOutcome.MALFORMED_EVENT

    def __init__(self, message: str, *, url: str | None = None) -> None:
        """Record the offending target URL when one was present."""
        self.url = url
        super().__init__(message)

    @classmethod
    def tag_not_found(cls, url: str) -> MalformedEventError:
        """Create an error for URLs without a ``/manifests/<tag>`` suffix."""
        return cls(f"Cannot find tag inside of event url: {url}", url=url)

    @classmethod
    def invalid_payload(cls, detail: str) -> MalformedEventError:
        """Create an error for payloads missing required fields."""
        return cls(f"Malformed registry event: {detail}")


class UnknownRegistryError(PushEventRejectedError):
    """Raised when the event comes from a host that is not registered."""

    outcome = PushOutcome.UNKNOWN_REGISTRY

    def __init__(self, host: str) -> None:
        """Record the unregistered source host."""
        self.host = host
        super().__init__(f"Event comes from an unknown registry: {host}")


class UnknownActorError(PushEventRejectedError):
    """Raised when the pushing identity is not a known user."""

    outcome = PushOutcome.UNKNOWN_ACTOR

    def __init__(self, actor_name: str) -> None:
        """Record the unknown actor name."""
        self.actor_name = actor_name
        super().__init__(f"Event comes from an unknown user: {actor_name}")


class UnknownNamespaceError(PushEventRejectedError):
    """Raised when a push targets a namespace that was never provisioned."""

    outcome = PushOutcome.UNKNOWN_NAMESPACE

    def __init__(self, namespace_name: str) -> None:
        """Record the missing namespace name."""
        self.namespace_name = namespace_name
        super().__init__(f"Namespace is not provisioned: {namespace_name}")
