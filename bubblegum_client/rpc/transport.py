"""
Transport protocol for JSON-RPC calls.

Defines the seam where the concrete HTTP implementation plugs in. The
JSON-RPC client depends on this protocol, not on httpx directly, so the
transport can be swapped for test fakes without changing classification
logic.

A transport returns the raw HTTP status and body for every response it
receives, whatever the status. It raises only when no response arrived
at all (connection refused, DNS failure, TLS error, timeout). Turning
status and body into a classified outcome is the client's job.

Deadlines belong to the transport. The protocol defines none, so every
concrete transport must enforce its own.

Concrete implementations:
    - HttpxTransport (default, uses httpx.Client)
    - FakeTransport (tests, returns canned replies)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0


class TransportError(Exception):
    """No HTTP response was received.

    Attributes:
        url: Endpoint the request was sent to.
        timed_out: True if the transport deadline expired.
    """

    def __init__(self, message: str, *, url: str, timed_out: bool = False) -> None:
        super().__init__(message)
        self.url = url
        self.timed_out = timed_out


@dataclass(frozen=True)
class HttpReply:
    """Raw HTTP response: status code and undecoded body text."""

    status_code: int
    text: str


@runtime_checkable
class JsonRpcTransport(Protocol):
    """Synchronous transport for JSON-RPC POST requests."""

    def post_json(self, url: str, payload: dict[str, Any]) -> HttpReply:
        """POST ``payload`` as JSON to ``url`` and return the raw reply.

        Raises:
            Exception: On transport-level failures. The JSON-RPC client
                classifies any exception as NETWORK_ERROR.
        """
        ...


class HttpxTransport:
    """Default transport using httpx.Client.

    Args:
        timeout: Request deadline in seconds, applied to connect, read,
            write and pool acquisition.
        headers: Extra headers sent with every request (e.g. a provider
            API key). Content-Type is always application/json.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_S,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._timeout = timeout
        self._headers = headers or {}

    @property
    def timeout(self) -> float:
        return self._timeout

    def post_json(self, url: str, payload: dict[str, Any]) -> HttpReply:
        """Send a JSON-RPC request via httpx."""
        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.post(
                    url,
                    json=payload,
                    headers={**self._headers, "Content-Type": "application/json"},
                )
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"request timed out after {self._timeout}s",
                url=url,
                timed_out=True,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"request failed: {exc}", url=url) from exc

        logger.debug(
            "%s -> HTTP %d (%d bytes)",
            payload.get("method"),
            response.status_code,
            len(response.content),
        )
        return HttpReply(status_code=response.status_code, text=response.text)
