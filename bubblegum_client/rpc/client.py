"""
RPC client protocol — the network boundary.

The workflows depend on this interface, not on a concrete client, so
they can be tested with a fake that records calls and returns canned
outcomes.

Concrete implementations:
    - JsonRpcClient (real, over a JsonRpcTransport)
    - FakeRpcClient (tests)

Three methods:
    - submit(tx_bytes) -> Outcome[signature]
    - get_asset_batch(ids) -> Outcome[decoded JSON body]
    - get_asset_proof_batch(ids) -> Outcome[decoded JSON body]

None of them raise for network, HTTP or JSON-RPC failures. Those come
back as Err with NETWORK_ERROR, HTTP_ERROR, RPC_PAYLOAD_ERROR or
MALFORMED_RESPONSE. Nothing retries.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from bubblegum_client.outcome import Outcome


@runtime_checkable
class RpcClient(Protocol):
    """Interface for compressed-NFT RPC operations."""

    def submit(self, tx_bytes: bytes) -> Outcome[str]:
        """Submit a signed, serialized transaction.

        Returns:
            Ok(signature) when the node returned a ``result``.
        """
        ...

    def get_asset_batch(self, ids: Sequence[str]) -> Outcome[Any]:
        """DAS ``getAssetBatch``. Ok carries the decoded body unmodified."""
        ...

    def get_asset_proof_batch(self, ids: Sequence[str]) -> Outcome[Any]:
        """DAS ``getAssetProofBatch``. Ok carries the decoded body unmodified."""
        ...
