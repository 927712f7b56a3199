from __future__ import annotations

import json

import pytest
import requests

from reclaim_client.api_client import ApiClient
from reclaim_client.config import ClientSettings
from reclaim_client.session import SessionContext
from reclaim_tracker.materials.models import SessionUser


def _response(status_code, payload, content, content_type):
    response = requests.Response()
    response.status_code = status_code
    if content is None:
        content = b"" if payload is None else json.dumps(payload).encode("utf-8")
    response._content = content
    response.headers["Content-Type"] = content_type
    response.encoding = "utf-8"
    return response


class FakeHttp:
    """Records outgoing requests and replays queued responses in order."""

    def __init__(self):
        self.calls = []
        self.responses = []

    def queue(self, status_code=200, payload=None, *, content=None, content_type="application/json"):
        self.responses.append(_response(status_code, payload, content, content_type))

    def fail_with(self, exc):
        self.responses.append(exc)

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def session_context():
    return SessionContext({})


@pytest.fixture
def signed_in(session_context):
    session_context.establish("token-123", SessionUser(id=1, email="admin@example.com", roles=["ADMIN"]))
    return session_context


@pytest.fixture
def fake_http():
    return FakeHttp()


@pytest.fixture
def api(signed_in, fake_http):
    settings = ClientSettings(api_base_url="http://backend/api", timeout_s=3)
    return ApiClient(settings, signed_in, http=fake_http)

