"""Error kinds raised by the incident API client."""

from __future__ import annotations

import asyncio


class IncidentAPIError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(IncidentAPIError):
    """Exception raised for errors while loading client configuration."""


class TransportError(IncidentAPIError):
    """Network, DNS or TLS failure reported by the gateway.

    The underlying ``httpx`` exception is kept as ``__cause__``.
    """


class HTTPStatusError(IncidentAPIError):
    """The service answered with a 4xx or 5xx status."""

    def __init__(self, status_code: int, body: str, method: str, path: str) -> None:
        self.status_code = status_code
        self.body = body
        self.method = method
        self.path = path
        super().__init__(f"{method} {path} returned HTTP {status_code}: {body[:200]}")


class NotFound(HTTPStatusError):
    """HTTP 404 from the service."""


class MissingEnvelopeKey(IncidentAPIError):
    """A well-formed JSON object lacks the expected wrapper key."""

    def __init__(self, key: str, present: list[str]) -> None:
        self.key = key
        self.present = present
        shown = ", ".join(present) if present else "none"
        super().__init__(
            f"Response does not have '{key}' field (keys present: {shown})"
        )


class DecodeError(IncidentAPIError):
    """Malformed JSON or a field that does not match the expected type."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


# asyncio's own exception; not an IncidentAPIError.
Cancelled = asyncio.CancelledError


class DeadlineExceeded(IncidentAPIError, TimeoutError):
    """The per-call deadline expired before the service answered."""


def status_error(status_code: int, body: str, method: str, path: str) -> HTTPStatusError:
    """Build the most specific status error for ``status_code``."""
    cls = NotFound if status_code == 404 else HTTPStatusError
    return cls(status_code, body, method, path)
