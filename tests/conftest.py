"""Shared fixtures: a client wired to an in-memory fake service."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest
import pytest_asyncio

from incidentapi.client import IncidentsClient
from incidentapi.config import ClientConfig
from incidentapi.gateway import HTTPGateway

BASE_URL = "https://incidents.test/v2"


class FakeService:
    """Records every request and answers from a queue of handlers."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda r: (
            httpx.Response(500)
        )

    def reply(self, status_code: int = 200, payload: object = None) -> None:
        """Answer every following request with ``payload`` as JSON."""
        self.handler = lambda r: httpx.Response(status_code, json=payload)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> object:
        return json.loads(self.last.content)


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL, api_token="secret-token")


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest_asyncio.fixture
async def client(config: ClientConfig, service: FakeService):
    gateway = HTTPGateway(config, transport=httpx.MockTransport(service))
    yield IncidentsClient(gateway)
    await gateway.aclose()
