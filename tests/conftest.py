"""Pytest configuration and fixtures."""

import json
import os

import httpx
import pytest

# Set test environment before app modules read it
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("VPS_API_BASE", "https://vps.example.com")

from app.adapters.vps_client import UpstreamProxy
from app.services.vps_tools import build_registry

BASE_URL = "https://vps.example.com"


class BackendStub:
    """Stand-in for the VPS API, served through httpx.MockTransport.

    Records every request; responses are configured per endpoint path and
    default to ``{"success": true}``.
    """

    def __init__(self):
        self.requests = []
        self._responses = {}

    def respond(self, path, status_code=200, json_body=None, text=None):
        if text is not None:
            self._responses[path] = httpx.Response(status_code, text=text)
        else:
            body = {"success": True} if json_body is None else json_body
            self._responses[path] = httpx.Response(status_code, json=body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responses.get(request.url.path)
        if response is None:
            return httpx.Response(200, json={"success": True})
        return httpx.Response(
            response.status_code,
            content=response.content,
            headers=response.headers,
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_body(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def backend():
    """Backend stub with no configured responses."""
    return BackendStub()


@pytest.fixture
def proxy(backend):
    """Upstream proxy wired to the backend stub."""
    return UpstreamProxy(BASE_URL, transport=backend.transport)


@pytest.fixture
def registry(proxy):
    """Registry holding the four VPS tools."""
    return build_registry(proxy)
