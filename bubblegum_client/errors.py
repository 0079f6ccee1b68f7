"""
Error taxonomy for compressed-NFT operations.

Every failure an operation can report is one ``ErrorKind``. The kind is
the machine-readable category; ``detail`` is for humans, ``context``
carries the parameters that produced the failure (asset id, destination,
mint arguments, transfer stage).

Layering:
    - RPC layer: NETWORK_ERROR, HTTP_ERROR, RPC_PAYLOAD_ERROR,
      MALFORMED_RESPONSE.
    - Connection: NOT_INITIALIZED, ALREADY_INITIALIZED.
    - Orchestration: everything else. Orchestration errors that wrap an
      RPC failure keep it in ``cause``.

No secrets, ever. The credential is never placed in detail or context.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Failure categories reported by connection, RPC and workflows."""

    NOT_INITIALIZED = "NOT_INITIALIZED"
    ALREADY_INITIALIZED = "ALREADY_INITIALIZED"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    ASSET_NOT_FOUND = "ASSET_NOT_FOUND"
    NOT_OWNER = "NOT_OWNER"
    PROOF_UNAVAILABLE = "PROOF_UNAVAILABLE"
    NOT_COMPRESSED = "NOT_COMPRESSED"
    BUILD_FAILED = "BUILD_FAILED"
    NETWORK_ERROR = "NETWORK_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    RPC_PAYLOAD_ERROR = "RPC_PAYLOAD_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    EXPIRED_BLOCKHASH = "EXPIRED_BLOCKHASH"
    UNKNOWN_SUBMIT_FAILURE = "UNKNOWN_SUBMIT_FAILURE"
    SUBMIT_FAILED = "SUBMIT_FAILED"


@dataclass(frozen=True)
class OperationError:
    """Structured, classified failure.

    Attributes:
        kind: Failure category.
        detail: Human-readable explanation, including guidance on what
            the caller should do next where there is any.
        status: HTTP status code. Only set for HTTP_ERROR.
        payload: The JSON-RPC ``error`` member for RPC_PAYLOAD_ERROR,
            the response body text for HTTP_ERROR, otherwise None.
        cause: Lower-level error this one wraps (e.g. the RPC error
            behind a SUBMIT_FAILED).
        context: Diagnostic parameters that produced the failure.
    """

    kind: ErrorKind
    detail: str | None = None
    status: int | None = None
    payload: Any = None
    cause: OperationError | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def with_context(self, **extra: Any) -> OperationError:
        """Return a copy with ``extra`` merged into context."""
        return replace(self, context={**self.context, **extra})

    def root_cause(self) -> OperationError:
        """Follow ``cause`` links down to the innermost error."""
        error = self
        while error.cause is not None:
            error = error.cause
        return error

    def to_dict(self) -> dict[str, object]:
        result: dict[str, object] = {"kind": str(self.kind)}
        if self.detail is not None:
            result["detail"] = self.detail
        if self.status is not None:
            result["status"] = self.status
        if self.payload is not None:
            result["payload"] = self.payload
        if self.cause is not None:
            result["cause"] = self.cause.to_dict()
        if self.context:
            result["context"] = dict(self.context)
        return result

    def __str__(self) -> str:
        if self.detail:
            return f"{self.kind}: {self.detail}"
        return str(self.kind)
