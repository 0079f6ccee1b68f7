"""
JSON-RPC client — real network implementation of RpcClient.

Builds the request envelopes, posts them through an injectable transport
(JsonRpcTransport) and classifies every reply into an Outcome. The
transport can be swapped for a test fake without changing
classification logic.

No retry loops. No secrets. The endpoint is read from the
ConnectionContext on every call, so a client built before the context
is initialized reports NOT_INITIALIZED instead of sending anything.

Reply classification:
    - transport raised                 -> NETWORK_ERROR
    - HTTP status other than 200       -> HTTP_ERROR (status, body)
    - 200, body not JSON               -> MALFORMED_RESPONSE
    - submit, 200 with ``result``      -> Ok(signature)
    - submit, 200 with ``error``       -> RPC_PAYLOAD_ERROR (error object)
    - submit, 200 with neither         -> MALFORMED_RESPONSE
    - batch lookups, 200 JSON          -> Ok(decoded body, unmodified)
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Sequence
from typing import Any

from bubblegum_client.connection import ConnectionContext
from bubblegum_client.errors import ErrorKind, OperationError
from bubblegum_client.outcome import Err, Ok, Outcome
from bubblegum_client.rpc.transport import (
    HttpReply,
    HttpxTransport,
    JsonRpcTransport,
    TransportError,
)

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"
SUBMIT_REQUEST_ID = 1
DAS_REQUEST_ID = "test"

# Longest slice of a non-200 body kept in HTTP_ERROR payloads.
_MAX_BODY_CHARS = 2048


def build_submit_request(tx_bytes: bytes) -> dict[str, Any]:
    """``sendTransaction`` envelope with the transaction as base64."""
    encoded = base64.b64encode(tx_bytes).decode("ascii")
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": SUBMIT_REQUEST_ID,
        "method": "sendTransaction",
        "params": [encoded, {"encoding": "base64"}],
    }


def build_das_request(method: str, ids: Sequence[str]) -> dict[str, Any]:
    """DAS batched lookup envelope (``getAssetBatch``, ``getAssetProofBatch``)."""
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": DAS_REQUEST_ID,
        "method": method,
        "params": {"ids": list(ids)},
    }


class JsonRpcClient:
    """JSON-RPC client implementing the RpcClient protocol.

    Args:
        connection: Context supplying the endpoint URL.
        transport: Injectable transport for HTTP POST. Defaults to
            HttpxTransport with its default timeout. Pass a fake for
            testing.
    """

    def __init__(
        self,
        connection: ConnectionContext,
        transport: JsonRpcTransport | None = None,
    ) -> None:
        self._connection = connection
        self._transport = transport or HttpxTransport()

    @property
    def transport(self) -> JsonRpcTransport:
        return self._transport

    # -----------------------------------------------------------------
    # RpcClient protocol methods
    # -----------------------------------------------------------------

    def submit(self, tx_bytes: bytes) -> Outcome[str]:
        """Submit a serialized transaction via ``sendTransaction``."""
        reply = self._call(build_submit_request(tx_bytes))
        if isinstance(reply, Err):
            return reply
        return _parse_submit_body(reply.value)

    def get_asset_batch(self, ids: Sequence[str]) -> Outcome[Any]:
        """Look up asset records via DAS ``getAssetBatch``."""
        return self._call(build_das_request("getAssetBatch", ids))

    def get_asset_proof_batch(self, ids: Sequence[str]) -> Outcome[Any]:
        """Look up Merkle proofs via DAS ``getAssetProofBatch``."""
        return self._call(build_das_request("getAssetProofBatch", ids))

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _call(self, payload: dict[str, Any]) -> Outcome[Any]:
        """POST ``payload`` and decode a 200 reply. Never raises."""
        endpoint = self._connection.endpoint()
        if isinstance(endpoint, Err):
            return endpoint

        method = payload["method"]
        try:
            reply = self._transport.post_json(endpoint.value, payload)
        except TransportError as exc:
            logger.warning("%s: transport failure: %s", method, exc)
            return Err(
                OperationError(
                    kind=ErrorKind.NETWORK_ERROR,
                    detail=str(exc),
                    context={"method": method, "timed_out": exc.timed_out},
                )
            )
        except Exception as exc:
            # Any transport may raise anything; no reply means network error.
            logger.warning("%s: transport failure: %s", method, exc)
            return Err(
                OperationError(
                    kind=ErrorKind.NETWORK_ERROR,
                    detail=f"{type(exc).__name__}: {exc}",
                    context={"method": method},
                )
            )

        return _decode_reply(method, reply)


# =====================================================================
# Reply parsing (pure functions, no I/O)
# =====================================================================


def _decode_reply(method: str, reply: HttpReply) -> Outcome[Any]:
    """Classify status and decode the body of a raw HTTP reply."""
    if reply.status_code != 200:
        logger.warning("%s: HTTP %d", method, reply.status_code)
        return Err(
            OperationError(
                kind=ErrorKind.HTTP_ERROR,
                detail=f"endpoint returned HTTP {reply.status_code}",
                status=reply.status_code,
                payload=reply.text[:_MAX_BODY_CHARS],
                context={"method": method},
            )
        )

    try:
        body = json.loads(reply.text)
    except ValueError as exc:
        logger.warning("%s: response body is not JSON", method)
        return Err(
            OperationError(
                kind=ErrorKind.MALFORMED_RESPONSE,
                detail=f"response body is not valid JSON: {exc}",
                context={"method": method},
            )
        )

    return Ok(body)


def _parse_submit_body(body: Any) -> Outcome[str]:
    """Turn a decoded ``sendTransaction`` body into a signature or error."""
    if not isinstance(body, dict):
        return Err(
            OperationError(
                kind=ErrorKind.MALFORMED_RESPONSE,
                detail="sendTransaction response is not a JSON object",
                context={"method": "sendTransaction"},
            )
        )

    if "result" in body:
        logger.debug("sendTransaction accepted: %s", body["result"])
        return Ok(body["result"])

    if "error" in body:
        error = body["error"]
        message = error.get("message") if isinstance(error, dict) else error
        logger.warning("sendTransaction rejected: %s", message)
        return Err(
            OperationError(
                kind=ErrorKind.RPC_PAYLOAD_ERROR,
                detail=f"node rejected transaction: {message}",
                payload=error,
                context={"method": "sendTransaction"},
            )
        )

    return Err(
        OperationError(
            kind=ErrorKind.MALFORMED_RESPONSE,
            detail="sendTransaction response has neither result nor error",
            context={"method": "sendTransaction"},
        )
    )
