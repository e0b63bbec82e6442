"""Fixtures for API tests."""

import hashlib
import hmac
import json
import time
from unittest.mock import AsyncMock

import pytest
from slack_sdk.signature import SignatureVerifier

from slackrag.interfaces.api.app import create_app
from slackrag.interfaces.api.resources.health import HealthResource
from slackrag.interfaces.api.resources.slack_events import SlackEventsResource

SIGNING_SECRET = "test-signing-secret"


def sign(body: bytes, secret: str = SIGNING_SECRET, timestamp: int | None = None) -> dict[str, str]:
    """Slack v0 request signature headers for body."""
    ts = str(timestamp if timestamp is not None else int(time.time()))
    base = f"v0:{ts}:{body.decode()}".encode()
    digest = hmac.new(secret.encode(), base, hashlib.sha256).hexdigest()
    return {
        "X-Slack-Request-Timestamp": ts,
        "X-Slack-Signature": f"v0={digest}",
        "Content-Type": "application/json",
    }


def encode(payload: dict) -> bytes:
    return json.dumps(payload).encode()


@pytest.fixture
def dispatcher() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def jobs() -> list:
    """Background jobs captured instead of scheduled after the response."""
    return []


@pytest.fixture
def app(dispatcher, jobs):
    """Falcon ASGI app with the Slack events and health resources."""
    resource = SlackEventsResource(
        dispatcher,
        SignatureVerifier(SIGNING_SECRET),
        spawn=lambda resp, job: jobs.append(job),
    )
    return create_app(slack_events_resource=resource, health_resource=HealthResource())


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    from falcon.testing import TestClient
    return TestClient(app)
