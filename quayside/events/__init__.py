"""Registry notification payloads and the push-event parser."""

from __future__ import annotations

from quayside.events.errors import (
    MalformedEventError,
    PushEventRejectedError,
    PushOutcome,
    UnknownActorError,
    UnknownNamespaceError,
    UnknownRegistryError,
)
from quayside.events.models import EventActor, EventRequest, EventTarget, PushEvent, RegistryEvent
from quayside.events.parser import extract_tag, is_push_action, parse_push_event

__all__ = [
    "EventActor",
    "EventRequest",
    "EventTarget",
    "MalformedEventError",
    "PushEvent",
    "PushEventRejectedError",
    "PushOutcome",
    "RegistryEvent",
    "UnknownActorError",
    "UnknownNamespaceError",
    "UnknownRegistryError",
    "extract_tag",
    "is_push_action",
    "parse_push_event",
]
