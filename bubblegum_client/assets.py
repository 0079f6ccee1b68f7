"""
Compressed-asset records parsed from DAS API responses.

Both types are ephemeral: built from one RPC response, used for one
transfer attempt, never cached. A proof is a snapshot of the tree at
fetch time and may already be stale by the time it is submitted.

DAS shapes consumed:
    getAssetBatch       -> {"result": [{"id": ..., "ownership": {"owner": ...},
                                        "compression": {"creator_hash": ...,
                                                        "data_hash": ...,
                                                        "leaf_id": ...,
                                                        "tree": ...}}]}
    getAssetProofBatch  -> {"result": {<asset_id>: {"proof": [...], "root": ...}}}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CompressionInfo:
    """Where and how an asset's leaf sits in its Merkle tree."""

    creator_hash: str
    data_hash: str
    leaf_id: int
    tree_address: str

    @classmethod
    def from_das(cls, data: Any) -> CompressionInfo:
        """Parse a DAS ``compression`` block.

        Raises:
            ValueError: If the block is missing or any field is absent
                or of the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError("compression block missing")

        strings: dict[str, str] = {}
        for key in ("creator_hash", "data_hash", "tree"):
            value = data.get(key)
            if not isinstance(value, str) or not value:
                raise ValueError(f"compression.{key} missing")
            strings[key] = value

        leaf_id = data.get("leaf_id")
        # bool is an int subclass; a boolean leaf id is malformed
        if not isinstance(leaf_id, int) or isinstance(leaf_id, bool) or leaf_id < 0:
            raise ValueError(f"compression.leaf_id must be a non-negative integer, got: {leaf_id!r}")

        return cls(
            creator_hash=strings["creator_hash"],
            data_hash=strings["data_hash"],
            leaf_id=leaf_id,
            tree_address=strings["tree"],
        )


@dataclass(frozen=True)
class AssetRecord:
    """One entry of a getAssetBatch result.

    ``compression`` is the raw block as returned; it is parsed into
    CompressionInfo only when a transfer needs it, so a non-compressed
    asset can still be inspected for ownership.
    """

    asset_id: str
    owner: str
    compression: dict[str, Any] | None

    @classmethod
    def from_das(cls, item: Any, asset_id: str) -> AssetRecord:
        """Parse one getAssetBatch result entry.

        Raises:
            ValueError: If the entry is not an object or has no owner.
        """
        if not isinstance(item, dict):
            raise ValueError("asset entry is not an object")
        ownership = item.get("ownership")
        owner = ownership.get("owner") if isinstance(ownership, dict) else None
        if not isinstance(owner, str) or not owner:
            raise ValueError("ownership.owner missing")
        compression = item.get("compression")
        return cls(
            asset_id=item.get("id") or asset_id,
            owner=owner,
            compression=compression if isinstance(compression, dict) else None,
        )

    def compression_info(self) -> CompressionInfo:
        """Parsed compression fields. Raises ValueError if absent or malformed."""
        return CompressionInfo.from_das(self.compression)


@dataclass(frozen=True)
class AssetProof:
    """Merkle proof for one asset, fetched as a single unit.

    ``proof_path`` holds sibling hashes ordered from leaf to root. The
    path and root always come from the same response and are passed to
    the builder unmodified.
    """

    asset_id: str
    proof_path: tuple[str, ...]
    root: str

    @classmethod
    def from_das(cls, result: Any, asset_id: str) -> AssetProof:
        """Parse the entry for ``asset_id`` from a getAssetProofBatch result.

        Raises:
            ValueError: If there is no entry for the asset, or it lacks
                a proof list or root.
        """
        if not isinstance(result, dict):
            raise ValueError("proof result is not an object keyed by asset id")
        entry = result.get(asset_id)
        if not isinstance(entry, dict):
            raise ValueError(f"no proof entry for asset {asset_id}")

        proof = entry.get("proof")
        root = entry.get("root")
        if not isinstance(proof, list) or not all(isinstance(p, str) for p in proof):
            raise ValueError("proof must be a list of hash strings")
        if not isinstance(root, str) or not root:
            raise ValueError("root missing")

        return cls(asset_id=asset_id, proof_path=tuple(proof), root=root)
