"""
Transaction builder protocol — the encoding and signing boundary.

The workflows never encode instructions or touch key material beyond
passing the credential through. Given structured parameters, a builder
returns a fully signed, serialized transaction. The bytes are opaque to
everything except RpcClient.submit().

Builders fetch their own recent blockhash, so every build is fresh. A
transaction rejected for an expired blockhash must be rebuilt, not
resent.

Concrete implementations:
    - A native binding around the compression program's instruction
      builders (supplied by the application)
    - FakeBuilder (tests)

Any exception raised by a builder is reported by the calling service as
BUILD_FAILED with the exception text as detail. Builders are not
expected to classify their own failures.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class CreateTreeBuild:
    """Result of building a tree-creation transaction.

    Attributes:
        tx_bytes: Serialized, signed transaction.
        tree_address: Address of the newly generated tree account. This
            is the value reported to the caller on success; the submit
            response only carries a signature.
    """

    tx_bytes: bytes
    tree_address: str


@runtime_checkable
class TransactionBuilder(Protocol):
    """Interface for building signed compressed-NFT transactions."""

    def build_create_tree(self, credential: str) -> CreateTreeBuild:
        """Build a transaction creating a new Merkle tree and its config."""
        ...

    def build_mint(
        self,
        credential: str,
        tree_address: str,
        name: str,
        symbol: str,
        uri: str,
        creator_address: str,
        royalty_share: int | str,
    ) -> bytes:
        """Build a transaction minting one compressed asset into a tree."""
        ...

    def build_transfer(
        self,
        credential: str,
        to_address: str,
        asset_id: str,
        leaf_id: int,
        data_hash: str,
        creator_hash: str,
        root: str,
        proof_path: Sequence[str],
        tree_address: str,
    ) -> bytes:
        """Build a transaction transferring a compressed asset.

        ``root`` and ``proof_path`` must be the pair returned by a single
        proof lookup, unmodified.
        """
        ...
