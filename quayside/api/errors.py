"""API-layer exceptions and the Falcon handlers that render them.

Every handler answers with the same JSON shape: a ``title``, a
``description`` and, for input errors, the offending ``field``.

Usage
-----
Register error handlers on the Falcon app::

    app.add_error_handler(RegistryNotFoundError, handle_registry_not_found)
    app.add_error_handler(InvalidInputError, handle_invalid_input)

"""

from __future__ import annotations

import typing as typ

import falcon

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from quayside.registry.errors import RegistryNotFoundError

__all__ = [
    "InvalidInputError",
    "handle_invalid_input",
    "handle_registry_not_found",
]


class InvalidInputError(Exception):
    """Raised when a request body cannot be read as a notification envelope.

    Attributes
    ----------
    reason
        What was wrong with the input.
    field
        Envelope field that failed validation, or ``"body"`` when the body
        is not JSON at all.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Store the failure reason and the offending field."""
        self.reason = reason
        self.field = field
        super().__init__(reason if field is None else f"{field}: {reason}")


def _render_error(
    resp: Response,
    status: str,
    title: str,
    description: str,
    *,
    field: str | None = None,
) -> None:
    resp.status = status
    resp.media = {"title": title, "description": description}
    if field is not None:
        resp.media["field"] = field


async def handle_registry_not_found(
    _req: Request,
    resp: Response,
    ex: RegistryNotFoundError,
    _params: dict[str, typ.Any],
) -> None:
    """Answer requests naming an unregistered host with HTTP 404."""
    _render_error(resp, falcon.HTTP_404, "Registry not found", str(ex))


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Answer unreadable webhook bodies with HTTP 400.

    The registry retries failed deliveries, so only bodies that can never
    succeed are rejected this way; rejected events inside a valid
    envelope are reported per event with HTTP 200.
    """
    _render_error(
        resp, falcon.HTTP_400, "Invalid input", ex.reason, field=ex.field
    )
