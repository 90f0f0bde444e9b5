"""Typed views of container registry notification payloads.

The registry posts envelopes of the form ``{"events": [...]}``; each event
carries the pushed ``target``, the originating ``request`` and the ``actor``
who authenticated. Only the fields Quayside relies on are required, and
unknown fields are ignored so newer registry versions keep decoding.
"""

from __future__ import annotations

import dataclasses as dc

import msgspec


class EventTarget(msgspec.Struct, frozen=True, rename="camel"):
    """Resource the event refers to."""

    repository: str
    url: str
    media_type: str | None = None
    digest: str | None = None
    tag: str | None = None
    size: int | None = None


class EventRequest(msgspec.Struct, frozen=True):
    """HTTP request that triggered the event."""

    host: str
    id: str | None = None
    addr: str | None = None
    method: str | None = None
    useragent: str | None = None


class EventActor(msgspec.Struct, frozen=True):
    """Identity that performed the request."""

    name: str


class RegistryEvent(msgspec.Struct, frozen=True):
    """One entry of a registry notification envelope."""

    target: EventTarget
    request: EventRequest
    actor: EventActor
    id: str | None = None
    timestamp: str | None = None
    action: str | None = None


@dc.dataclass(frozen=True, slots=True)
class PushEvent:
    """Fields of a manifest push the pipeline acts upon."""

    repository_path: str
    tag_name: str
    actor_name: str
    source_host: str
    event_id: str | None = None
