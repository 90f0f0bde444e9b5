"""Dramatiq broker selection for catalog actors.

``@dramatiq.actor`` binds to the global broker when the decorator runs, so
:mod:`quayside.catalog.actor` calls :func:`ensure_broker_configured` at import
time, before its actors are declared. A configured broker is left untouched;
a ``StubBroker`` is only installed when none exists and stubs are allowed.
"""

from __future__ import annotations

import os
import sys
import threading

import dramatiq
from dramatiq.brokers.stub import StubBroker

_BROKER_LOCK = threading.Lock()
_broker_configured = False
_TRUTHY = frozenset({"1", "true", "yes"})


def _is_running_tests() -> bool:
    """Return True when the process is a pytest run."""
    return "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ


def _stub_broker_allowed() -> bool:
    allow_stub = os.environ.get("QUAYSIDE_ALLOW_STUB_BROKER", "")
    return allow_stub.strip().lower() in _TRUTHY or _is_running_tests()


def ensure_broker_configured() -> None:
    """Ensure a Dramatiq broker exists before an actor executes.

    Installs a ``StubBroker`` when none is configured and stub brokers are
    allowed (tests, or ``QUAYSIDE_ALLOW_STUB_BROKER``). Safe to call from
    several worker threads.

    Raises
    ------
    RuntimeError
        If no broker is configured and stub brokers are not allowed.

    """
    global _broker_configured  # noqa: PLW0603

    if _broker_configured:
        return

    with _BROKER_LOCK:
        if _broker_configured:
            return

        try:
            current_broker = dramatiq.get_broker()
        except (ImportError, LookupError):
            current_broker = None

        if current_broker is None:
            if not _stub_broker_allowed():
                message = (
                    "No Dramatiq broker configured. Set "
                    "QUAYSIDE_ALLOW_STUB_BROKER=1 for local runs or configure "
                    "a real broker."
                )
                raise RuntimeError(message)
            dramatiq.set_broker(StubBroker())

        _broker_configured = True
