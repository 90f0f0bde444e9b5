"""Registry notification endpoint.

Registries are configured to POST notification envelopes to
``/v2/webhooks/events``. Every envelope is answered with 200 once it has
been processed, including envelopes whose events were all rejected:
registries redeliver on non-2xx responses, and a rejected event will be
rejected again.

Usage
-----
Register the resource on the Falcon app::

    app.add_route("/v2/webhooks/events", RegistryEventsResource(processor))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import msgspec

from quayside.api.errors import InvalidInputError

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from quayside.ingestion.pipeline import PushEventProcessor

__all__ = ["RegistryEventsResource"]


def _decode_envelope(body: bytes) -> dict[str, typ.Any]:
    try:
        envelope = msgspec.json.decode(body)
    except msgspec.DecodeError as exc:
        raise InvalidInputError(str(exc), field="body") from exc

    if not isinstance(envelope, dict) or not isinstance(envelope.get("events"), list):
        reason = "expected an object with an 'events' list"
        raise InvalidInputError(reason, field="events")
    return envelope


class RegistryEventsResource:
    """Accept registry notification envelopes and process their events."""

    def __init__(self, processor: PushEventProcessor) -> None:
        """Store the push-event processor."""
        self._processor = processor

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST /v2/webhooks/events.

        Parameters
        ----------
        req
            Falcon request carrying the JSON envelope.
        resp
            Falcon response populated with per-event outcomes.

        Raises
        ------
        InvalidInputError
            If the body is not JSON or has no ``events`` list.

        """
        envelope = _decode_envelope(await req.stream.read())
        results = await self._processor.process_notification(envelope)
        resp.media = {
            "events": len(results),
            "results": [result.as_dict() for result in results],
        }
        resp.status = HTTPStatus.OK
