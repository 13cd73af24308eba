"""HTTP gateway: connection pool, authentication and default headers."""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from incidentapi.config import ClientConfig


class Gateway(Protocol):
    """The three verbs the client issues."""

    async def get(self, path: str) -> httpx.Response: ...

    async def post(
        self, path: str, body: Any, headers: dict[str, str] | None = None
    ) -> httpx.Response: ...

    async def put(
        self, path: str, body: Any, headers: dict[str, str] | None = None
    ) -> httpx.Response: ...


class HTTPGateway:
    """Shared ``httpx.AsyncClient`` rooted at the configured base URL.

    Use as an async context manager, or call ``aclose`` when done.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Accept": config.accept,
                "Authorization": f"Token token={config.api_token.get_secret_value()}",
                "User-Agent": config.user_agent,
            },
            timeout=httpx.Timeout(config.timeout),
            transport=transport,
        )

    async def get(self, path: str) -> httpx.Response:
        return await self._http.get(path)

    async def post(
        self, path: str, body: Any, headers: dict[str, str] | None = None
    ) -> httpx.Response:
        return await self._http.post(path, json=body, headers=headers)

    async def put(
        self, path: str, body: Any, headers: dict[str, str] | None = None
    ) -> httpx.Response:
        return await self._http.put(path, json=body, headers=headers)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> HTTPGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
