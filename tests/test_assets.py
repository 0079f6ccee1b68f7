"""
Tests for AssetRecord / AssetProof / CompressionInfo parsing of DAS payloads.
"""

from typing import Any

import pytest

from bubblegum_client.assets import AssetProof, AssetRecord, CompressionInfo

ASSET_ID = "4mKSoDDqApmF1DqXvVTSL7sGe1pCP2q6KomxEsYQMgZX"
OWNER = "3Kn6a9nJLW5324a5M3qW3xTpvnwGf7nKzBmpJVLYxfEP"
TREE = "9zHZkmbuC3RzrV8uLq3hxkXnxWnHkn7pMHYB7mW3Lpsr"


def _compression(**overrides: Any) -> dict[str, Any]:
    block: dict[str, Any] = {
        "creator_hash": "creatorHash111",
        "data_hash": "dataHash111",
        "leaf_id": 7,
        "tree": TREE,
        "compressed": True,
    }
    block.update(overrides)
    return block


def _asset(**overrides: Any) -> dict[str, Any]:
    item: dict[str, Any] = {
        "id": ASSET_ID,
        "ownership": {"owner": OWNER, "delegated": False},
        "compression": _compression(),
    }
    item.update(overrides)
    return item


class TestAssetRecord:
    def test_parses_owner_and_id(self) -> None:
        record = AssetRecord.from_das(_asset(), ASSET_ID)
        assert record.owner == OWNER
        assert record.asset_id == ASSET_ID

    def test_falls_back_to_requested_id(self) -> None:
        item = _asset()
        del item["id"]
        assert AssetRecord.from_das(item, "requested").asset_id == "requested"

    def test_missing_owner(self) -> None:
        with pytest.raises(ValueError, match="owner"):
            AssetRecord.from_das(_asset(ownership={}), ASSET_ID)

    def test_not_an_object(self) -> None:
        with pytest.raises(ValueError):
            AssetRecord.from_das(["nope"], ASSET_ID)

    def test_non_compressed_still_parses(self) -> None:
        record = AssetRecord.from_das(_asset(compression=None), ASSET_ID)
        assert record.compression is None
        with pytest.raises(ValueError, match="compression"):
            record.compression_info()


class TestCompressionInfo:
    def test_parses_fields(self) -> None:
        info = CompressionInfo.from_das(_compression())
        assert info == CompressionInfo(
            creator_hash="creatorHash111",
            data_hash="dataHash111",
            leaf_id=7,
            tree_address=TREE,
        )

    def test_leaf_zero_is_valid(self) -> None:
        assert CompressionInfo.from_das(_compression(leaf_id=0)).leaf_id == 0

    @pytest.mark.parametrize("leaf_id", [None, "7", True, -1, 1.5])
    def test_bad_leaf_id(self, leaf_id: object) -> None:
        with pytest.raises(ValueError, match="leaf_id"):
            CompressionInfo.from_das(_compression(leaf_id=leaf_id))

    @pytest.mark.parametrize("key", ["creator_hash", "data_hash", "tree"])
    def test_missing_string_field(self, key: str) -> None:
        block = _compression()
        del block[key]
        with pytest.raises(ValueError, match=key):
            CompressionInfo.from_das(block)


class TestAssetProof:
    def test_parses_keyed_entry(self) -> None:
        result = {ASSET_ID: {"proof": ["a", "b", "c"], "root": "rootHash", "tree_id": TREE}}
        proof = AssetProof.from_das(result, ASSET_ID)
        assert proof.proof_path == ("a", "b", "c")
        assert proof.root == "rootHash"

    def test_order_preserved(self) -> None:
        path = [f"hash{i}" for i in range(14)]
        proof = AssetProof.from_das({ASSET_ID: {"proof": path, "root": "r"}}, ASSET_ID)
        assert list(proof.proof_path) == path

    def test_no_entry_for_asset(self) -> None:
        with pytest.raises(ValueError, match="no proof entry"):
            AssetProof.from_das({"other": {"proof": [], "root": "r"}}, ASSET_ID)

    def test_missing_root(self) -> None:
        with pytest.raises(ValueError, match="root"):
            AssetProof.from_das({ASSET_ID: {"proof": ["a"]}}, ASSET_ID)

    def test_missing_proof(self) -> None:
        with pytest.raises(ValueError, match="proof"):
            AssetProof.from_das({ASSET_ID: {"root": "r"}}, ASSET_ID)

    def test_result_not_object(self) -> None:
        with pytest.raises(ValueError):
            AssetProof.from_das(None, ASSET_ID)
