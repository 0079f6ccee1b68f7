"""
RPC layer for compressed-NFT operations.

Public API:

    Protocols (for dependency injection):
        - ``RpcClient`` — network boundary (submit, asset lookup, proof lookup).
        - ``JsonRpcTransport`` — injectable transport protocol for JSON-RPC.

    Concrete client:
        - ``JsonRpcClient`` — JSON-RPC implementation of RpcClient.

    Transport:
        - ``HttpxTransport`` — default httpx-based transport.
        - ``HttpReply``, ``TransportError`` — transport result and failure.

    Error mapping:
        - ``classify_submit_failure()`` — submit error text → ErrorKind.
        - ``transfer_failure_hint()`` — submit error text → likely cause.
"""

from bubblegum_client.rpc.client import RpcClient
from bubblegum_client.rpc.errors import (
    SUBMIT_FAILURE_MARKERS,
    classify_submit_failure,
    transfer_failure_hint,
)
from bubblegum_client.rpc.jsonrpc_client import JsonRpcClient
from bubblegum_client.rpc.transport import (
    DEFAULT_TIMEOUT_S,
    HttpReply,
    HttpxTransport,
    JsonRpcTransport,
    TransportError,
)

__all__ = [
    "DEFAULT_TIMEOUT_S",
    "SUBMIT_FAILURE_MARKERS",
    "HttpReply",
    "HttpxTransport",
    "JsonRpcClient",
    "JsonRpcTransport",
    "RpcClient",
    "TransportError",
    "classify_submit_failure",
    "transfer_failure_hint",
]
