"""Unit tests for quayside.api.app application factory.

Usage
-----
Run with pytest::

    pytest tests/unit/test_api_app.py

"""

from __future__ import annotations

from unittest import mock

import falcon
import falcon.asgi
import falcon.testing
import pytest
from sqlalchemy.exc import OperationalError

from quayside.api.app import AppDependencies, create_app
from quayside.events import PushOutcome
from quayside.ingestion import PushEventResult
from tests.helpers import push_event


@pytest.fixture
def processor() -> mock.MagicMock:
    """Return a processor double that accepts every event."""
    processor = mock.MagicMock()
    processor.process_notification = mock.AsyncMock(
        side_effect=lambda envelope: [
            PushEventResult(PushOutcome.ACCEPTED) for _ in envelope["events"]
        ]
    )
    return processor


@pytest.fixture
def full_client(processor: mock.MagicMock) -> falcon.testing.TestClient:
    """Build a test client with domain dependencies."""
    deps = AppDependencies(session_factory=mock.MagicMock(), processor=processor)
    return falcon.testing.TestClient(create_app(deps))


@pytest.fixture
def health_client() -> falcon.testing.TestClient:
    """Build a test client for health-only mode."""
    return falcon.testing.TestClient(create_app())


class TestCreateAppHealthOnly:
    """Tests for create_app() without domain dependencies."""

    def test_returns_falcon_app(self) -> None:
        """create_app() returns a Falcon ASGI App."""
        assert isinstance(create_app(), falcon.asgi.App)

    def test_health_and_ready(self, health_client: falcon.testing.TestClient) -> None:
        """Health-only app answers both probes."""
        health = health_client.simulate_get("/health")
        ready = health_client.simulate_get("/ready")

        assert (health.status, health.json) == (falcon.HTTP_200, {"status": "ok"})
        assert (ready.status, ready.json) == (falcon.HTTP_200, {"status": "ready"})

    def test_webhook_not_registered(
        self, health_client: falcon.testing.TestClient
    ) -> None:
        """Without dependencies the webhook endpoint is absent."""
        result = health_client.simulate_post("/v2/webhooks/events", json={"events": []})
        assert result.status == falcon.HTTP_404


class TestWebhookEndpoint:
    """Tests for POST /v2/webhooks/events."""

    def test_processes_envelope(
        self, full_client: falcon.testing.TestClient, processor: mock.MagicMock
    ) -> None:
        """Envelopes are handed to the processor and summarised."""
        envelope = {"events": [push_event("busybox", "latest")]}

        result = full_client.simulate_post("/v2/webhooks/events", json=envelope)

        assert result.status == falcon.HTTP_200
        assert result.json == {
            "events": 1,
            "results": [{"outcome": "accepted", "repository": None, "tag": None}],
        }
        processor.process_notification.assert_awaited_once_with(envelope)

    def test_rejected_events_still_return_200(
        self, full_client: falcon.testing.TestClient, processor: mock.MagicMock
    ) -> None:
        """Rejections are reported in the body, not the status."""
        processor.process_notification.side_effect = None
        processor.process_notification.return_value = [
            PushEventResult(PushOutcome.UNKNOWN_REGISTRY)
        ]

        result = full_client.simulate_post(
            "/v2/webhooks/events", json={"events": [{"action": "push"}]}
        )

        assert result.status == falcon.HTTP_200
        assert result.json["results"][0]["outcome"] == "unknown_registry"

    @pytest.mark.parametrize(
        ("body", "field"),
        [
            (b"not json", "body"),
            (b"[]", "events"),
            (b'{"events": {}}', "events"),
            (b"{}", "events"),
        ],
    )
    def test_invalid_envelopes_are_400(
        self,
        full_client: falcon.testing.TestClient,
        processor: mock.MagicMock,
        body: bytes,
        field: str,
    ) -> None:
        """Bodies that are not envelopes are client errors."""
        result = full_client.simulate_post(
            "/v2/webhooks/events",
            body=body,
            headers={"Content-Type": "application/json"},
        )

        assert result.status == falcon.HTTP_400
        assert result.json["title"] == "Invalid input"
        assert result.json["field"] == field
        processor.process_notification.assert_not_awaited()


class TestReadyWithDatabase:
    """Tests for /ready when a database is configured."""

    def test_ready_reports_unavailable_database(self) -> None:
        """A failing ping turns readiness into 503."""
        session = mock.MagicMock()
        session.__aenter__ = mock.AsyncMock(return_value=session)
        session.__aexit__ = mock.AsyncMock(return_value=False)
        session.execute = mock.AsyncMock(
            side_effect=OperationalError("SELECT 1", {}, Exception("down"))
        )
        deps = AppDependencies(
            session_factory=mock.MagicMock(return_value=session),
            processor=mock.MagicMock(),
        )
        client = falcon.testing.TestClient(create_app(deps))

        result = client.simulate_get("/ready")

        assert result.status == falcon.HTTP_503
        assert result.json == {"status": "unavailable"}
