"""
Connection context — the credential + RPC endpoint pair.

A ConnectionContext is created empty and initialized exactly once. After
that its state is immutable for the lifetime of the object: there is no
update or reset. Changing connection parameters means constructing a new
context (and new services) or restarting the process.

The context is passed explicitly to every service and to the RPC client
rather than living in module-global state. Initialization is guarded by
a lock so that exactly one of several concurrent first callers succeeds;
reads after that need no locking because the state never changes.

The endpoint must serve the DAS API (``getAssetBatch``,
``getAssetProofBatch``); plain ledger RPC nodes do not, so transfers
against them fail at the asset lookup.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

import httpx

from bubblegum_client.errors import ErrorKind, OperationError
from bubblegum_client.outcome import Err, Ok, Outcome

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = {"http", "https"}


@dataclass(frozen=True)
class ConnectionState:
    """Immutable credential + endpoint pair.

    Attributes:
        credential: Base58 signing keypair. Opaque to everything except
            the transaction builder and address derivation.
        endpoint: Absolute http(s) URL of the JSON-RPC endpoint.
    """

    credential: str
    endpoint: str

    def __repr__(self) -> str:
        return (
            f"ConnectionState(credential=<redacted>, "
            f"endpoint={redact_endpoint(self.endpoint)!r})"
        )


def redact_endpoint(endpoint: str) -> str:
    """Endpoint with query string and fragment removed.

    DAS providers take the API key as a query parameter
    (``?api-key=...``), so only the redacted form is logged, put in
    error context, or shown in a repr.
    """
    try:
        return str(httpx.URL(endpoint).copy_with(query=None, fragment=None))
    except (httpx.InvalidURL, TypeError):
        return "<unparseable endpoint>"


def _not_initialized() -> Err:
    return Err(
        OperationError(
            kind=ErrorKind.NOT_INITIALIZED,
            detail="connection not established; call initialize(credential, endpoint) first",
        )
    )


def _validate_endpoint(endpoint: object) -> str | None:
    """Return a problem description, or None if the endpoint is usable."""
    if not isinstance(endpoint, str) or not endpoint:
        return "endpoint must be a non-empty string"
    try:
        url = httpx.URL(endpoint)
    except httpx.InvalidURL as exc:
        return f"endpoint is not a valid URL: {exc}"
    if url.scheme not in _ALLOWED_SCHEMES or not url.host:
        return f"endpoint must be an absolute http(s) URL, got: {redact_endpoint(endpoint)!r}"
    return None


class ConnectionContext:
    """Write-once holder of the connection state."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state: ConnectionState | None = None

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    def initialize(self, credential: str, endpoint: str) -> Outcome[ConnectionState]:
        """Set the credential and endpoint. Succeeds at most once.

        Returns:
            Ok(ConnectionState) on the first valid call.
            Err(ALREADY_INITIALIZED) on any later call; the original
            state is left untouched.
            Err(INVALID_ARGUMENT) for an empty credential or unusable
            endpoint; the context stays uninitialized.
        """
        with self._lock:
            if self._state is not None:
                logger.warning("rejected second connection initialization")
                return Err(
                    OperationError(
                        kind=ErrorKind.ALREADY_INITIALIZED,
                        detail=(
                            "connection already established; connection parameters "
                            "cannot be changed for the lifetime of this context"
                        ),
                        context={"endpoint": redact_endpoint(self._state.endpoint)},
                    )
                )

            if not isinstance(credential, str) or not credential:
                return Err(
                    OperationError(
                        kind=ErrorKind.INVALID_ARGUMENT,
                        detail="credential must be a non-empty string",
                    )
                )
            problem = _validate_endpoint(endpoint)
            if problem is not None:
                return Err(OperationError(kind=ErrorKind.INVALID_ARGUMENT, detail=problem))

            self._state = ConnectionState(credential=credential, endpoint=endpoint)

        logger.debug("connection initialized for endpoint %s", redact_endpoint(endpoint))
        return Ok(self._state)

    def state(self) -> Outcome[ConnectionState]:
        state = self._state
        if state is None:
            return _not_initialized()
        return Ok(state)

    def credential(self) -> Outcome[str]:
        state = self._state
        if state is None:
            return _not_initialized()
        return Ok(state.credential)

    def endpoint(self) -> Outcome[str]:
        state = self._state
        if state is None:
            return _not_initialized()
        return Ok(state.endpoint)

    def __repr__(self) -> str:
        state = self._state
        if state is None:
            return "ConnectionContext(<uninitialized>)"
        return f"ConnectionContext(endpoint={redact_endpoint(state.endpoint)!r})"
