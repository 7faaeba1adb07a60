"""Shared test fixtures for gatekeeper."""

import json

import httpx
import pytest

from gatekeeper.client import PermissionClient
from gatekeeper.config.models import GatekeeperConfig
from gatekeeper.permissions import create_permissions

MOCK_BASE_URL = "http://backstage:9191/i-am-a-mock-base"


class FakeDiscovery:
    def __init__(self, base_url: str = MOCK_BASE_URL):
        self.base_url = base_url
        self.calls: list[str] = []

    async def get_base_url(self, plugin_id: str) -> str:
        self.calls.append(plugin_id)
        return self.base_url


def allow_all(request: httpx.Request) -> httpx.Response:
    """Answer ALLOW for every submitted id, in submission order."""
    body = json.loads(request.content)
    return httpx.Response(200, json=[{"id": r["id"], "result": "ALLOW"} for r in body])


class RecordingService:
    """MockTransport handler that records every request it sees."""

    def __init__(self, responder=allow_all):
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_body(self) -> list[dict]:
        return json.loads(self.last_request.content)


@pytest.fixture
def mock_permissions():
    return create_permissions(
        {
            "TEST": {
                "name": "test.permission",
                "attributes": {},
                "resourceType": "test-resource",
            },
            "READ_DOC": {
                "name": "doc.read",
                "attributes": {"CRUD_ACTION": "read"},
                "resourceType": "doc",
            },
            "DELETE_DOC": {
                "name": "doc.delete",
                "attributes": {"CRUD_ACTION": "delete"},
                "resourceType": "doc",
            },
        }
    )


@pytest.fixture
def service():
    return RecordingService()


@pytest.fixture
def discovery():
    return FakeDiscovery()


@pytest.fixture
def http_client(service):
    return httpx.AsyncClient(transport=httpx.MockTransport(service))


@pytest.fixture
def client(discovery, http_client):
    return PermissionClient(discovery, http_client=http_client)


@pytest.fixture
def sample_config():
    return GatekeeperConfig()
