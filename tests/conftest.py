"""
Pytest configuration and fixtures for larkit tests.
"""

import json
import sys
from pathlib import Path

import httpx
import pytest

# Add the repository root to path for imports
# This allows `from larkit.client import ...` to work
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from larkit.client import Client  # noqa: E402
from larkit.config import ClientConfig  # noqa: E402
from larkit.http.transport import HttpTransport  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingHandler:
    """httpx.MockTransport handler that replays queued responses and records requests."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def json_bodies(self):
        return [json.loads(r.content) if r.content else None for r in self.requests]


def json_response(body, status_code=200, headers=None):
    return httpx.Response(status_code, json=body, headers=headers)


def page_envelope(items, has_more, **cursor):
    return {"code": 0, "msg": "success", "data": {"items": items, "has_more": has_more, **cursor}}


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def client_config():
    """Test client configuration."""
    return ClientConfig(app_id="cli_test", app_secret="secret_test")


@pytest.fixture
def make_transport():
    """Build an HttpTransport backed by httpx.MockTransport."""

    def _make(handler, **kwargs):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HttpTransport(client=http_client, **kwargs)

    return _make


@pytest.fixture
def make_client(client_config, make_transport):
    """Build a Client whose requests go to a RecordingHandler."""

    def _make(responses):
        handler = RecordingHandler(responses)
        return Client(client_config, transport=make_transport(handler)), handler

    return _make
