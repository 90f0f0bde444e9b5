"""Parse raw registry events into push events.

Registries emit many event kinds (pulls, blob uploads, deletions). Only
manifest pushes carry a target URL ending in ``/v2/<repository>/manifests/
<tag>``; everything else is rejected here, before any database access.
"""

from __future__ import annotations

import re
import typing as typ

import msgspec

from quayside.common.paths import split_repository_path
from quayside.events.errors import MalformedEventError
from quayside.events.models import PushEvent, RegistryEvent

PUSH_ACTION = "push"


def _decode_event(raw: typ.Mapping[str, typ.Any]) -> RegistryEvent:
    """Convert a decoded JSON event into a RegistryEvent."""
    try:
        return msgspec.convert(raw, type=RegistryEvent)
    except msgspec.ValidationError as exc:
        raise MalformedEventError.invalid_payload(str(exc)) from exc


def _manifest_url_pattern(repository: str) -> re.Pattern[str]:
    return re.compile(rf"/v2/{re.escape(repository)}/manifests/(?P<tag>[^/]+)$")


def extract_tag(url: str, repository: str) -> str:
    """Return the tag named by a manifest URL for ``repository``.

    Raises
    ------
    MalformedEventError
        If ``url`` is not a manifest reference for ``repository``.

    Examples
    --------
    >>> extract_tag("http://registry.test/v2/busybox/manifests/latest", "busybox")
    'latest'

    """
    match = _manifest_url_pattern(repository).search(url)
    if match is None:
        raise MalformedEventError.tag_not_found(url)
    return match.group("tag")


def parse_push_event(raw: typ.Mapping[str, typ.Any]) -> PushEvent:
    """Extract repository path, tag, actor and source host from ``raw``.

    Parameters
    ----------
    raw
        One event object from a registry notification envelope.

    Returns
    -------
    PushEvent
        The fields needed to reconcile the push.

    Raises
    ------
    MalformedEventError
        If required fields are missing or the target URL is not a manifest
        reference.

    """
    event = _decode_event(raw)
    repository = event.target.repository
    try:
        split_repository_path(repository)
    except ValueError as exc:
        raise MalformedEventError.invalid_payload(str(exc)) from exc

    return PushEvent(
        repository_path=repository,
        tag_name=extract_tag(event.target.url, repository),
        actor_name=event.actor.name,
        source_host=event.request.host,
        event_id=event.id,
    )


def is_push_action(raw: object) -> bool:
    """Return True when ``raw`` is an event object whose action is a push."""
    return isinstance(raw, dict) and raw.get("action") == PUSH_ACTION
