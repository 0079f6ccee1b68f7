"""
Submit-failure classification — maps RPC error text to ErrorKind.

The upstream RPC does not expose structured program-error codes for a
rejected transaction, only a message such as ``"Transaction simulation
failed: Error processing Instruction 0: custom program error: 0x1"``.
Classification is therefore case-insensitive pattern matching against
an ordered marker table.

This is brittle: a node that rewords its messages breaks it. An
unrecognized message maps to UNKNOWN_SUBMIT_FAILURE rather than a guess.
If the RPC ever returns structured error codes, replace the table lookup
with a code lookup and keep the function signatures.

Markers:
    - ``0x1``: custom program error 1, insufficient lamports for rent
      or fees; matched as a whole token so ``0x1771`` does not hit it
    - ``blockhash``: the transaction's recent blockhash expired before
      it landed (``Blockhash not found``)
"""

from __future__ import annotations

import re
from typing import Any

from bubblegum_client.errors import ErrorKind, OperationError

# Ordered, first match wins. Matching is case-insensitive. Program error
# codes are matched as whole tokens: "0x1" must not match Anchor codes
# such as 0x1771.
SUBMIT_FAILURE_MARKERS: tuple[tuple[re.Pattern[str], ErrorKind], ...] = (
    (re.compile(r"\b0x1\b", re.IGNORECASE), ErrorKind.INSUFFICIENT_FUNDS),
    (re.compile(r"blockhash", re.IGNORECASE), ErrorKind.EXPIRED_BLOCKHASH),
)

# Hints attached to transfer SUBMIT_FAILED errors. Never change the kind.
TRANSFER_HINT_MARKERS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b0x1\b", re.IGNORECASE), "insufficient_funds"),
    (re.compile(r"blockhash", re.IGNORECASE), "expired_blockhash"),
    # account-compression ConcurrentMerkleTreeError
    (re.compile(r"\b0x1771\b", re.IGNORECASE), "stale_proof"),
    (re.compile(r"invalid root|root mismatch", re.IGNORECASE), "stale_proof"),
    (re.compile(r"\b(?:leaf|proof)\b", re.IGNORECASE), "stale_proof"),
)


def error_message(error: OperationError) -> str:
    """Text to match markers against.

    Uses the JSON-RPC error ``message`` when the payload carries one,
    otherwise falls back to the error's detail.
    """
    payload: Any = error.payload
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    if isinstance(payload, str) and payload:
        return payload
    return error.detail or ""


def classify_submit_failure(error: OperationError) -> ErrorKind:
    """Classify a failed tree-creation submit.

    Args:
        error: The RPC-level error returned by submit.

    Returns:
        INSUFFICIENT_FUNDS, EXPIRED_BLOCKHASH, or UNKNOWN_SUBMIT_FAILURE
        when no marker matches.
    """
    message = error_message(error)
    for marker, kind in SUBMIT_FAILURE_MARKERS:
        if marker.search(message):
            return kind
    return ErrorKind.UNKNOWN_SUBMIT_FAILURE


def transfer_failure_hint(error: OperationError) -> str | None:
    """Best-guess cause of a failed transfer submit, or None."""
    message = error_message(error)
    for marker, hint in TRANSFER_HINT_MARKERS:
        if marker.search(message):
            return hint
    return None
