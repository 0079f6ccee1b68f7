"""
Transfer workflow — the multi-step verification protocol.

Stages:
    IDLE -> VALIDATING -> FETCHING_ASSET -> VERIFYING_OWNERSHIP
         -> FETCHING_PROOF -> BUILDING -> SUBMITTING -> DONE | FAILED

Every call starts at IDLE and runs to DONE or FAILED. Nothing is carried
between calls: the asset record and the proof are fetched fresh on every
attempt, because a proof/root pair is a snapshot of the tree and any
intervening mutation (another transfer, a mint into the same tree)
invalidates it.

Failure kinds by stage:
    VALIDATING           INVALID_ARGUMENT, NOT_INITIALIZED
    FETCHING_ASSET       ASSET_NOT_FOUND, MALFORMED_RESPONSE, RPC errors
    VERIFYING_OWNERSHIP  NOT_OWNER
    FETCHING_PROOF       PROOF_UNAVAILABLE, NOT_COMPRESSED, RPC errors
    BUILDING             BUILD_FAILED
    SUBMITTING           SUBMIT_FAILED

Every Err carries the asset id and ``context["stage"]``, the stage that
failed (never IDLE, DONE or FAILED). Ownership is checked before the
proof lookup so a transfer of someone else's asset costs one round
trip, not two.

A SUBMIT_FAILED is never retried here. Its ``context["hint"]`` names the
likely cause when the node's message matches a known marker
(insufficient funds, expired blockhash, stale proof); in every case the
caller recovers by calling ``transfer()`` again from scratch.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any

from bubblegum_client.assets import AssetProof, AssetRecord, CompressionInfo
from bubblegum_client.builder import TransactionBuilder
from bubblegum_client.connection import ConnectionContext
from bubblegum_client.errors import ErrorKind, OperationError
from bubblegum_client.keys import derive_address, is_base58_address
from bubblegum_client.outcome import Err, Ok, Outcome
from bubblegum_client.rpc.client import RpcClient
from bubblegum_client.rpc.errors import transfer_failure_hint
from bubblegum_client.rpc.jsonrpc_client import JsonRpcClient

logger = logging.getLogger(__name__)


class TransferStage(StrEnum):
    """Position of a transfer in its state machine.

    ``context["stage"]`` on a failed transfer names the stage that was
    running when it failed, one of VALIDATING through SUBMITTING. IDLE,
    DONE and FAILED mark where the machine starts and ends; none of
    them ever appears in an error's context.
    """

    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    FETCHING_ASSET = "FETCHING_ASSET"
    VERIFYING_OWNERSHIP = "VERIFYING_OWNERSHIP"
    FETCHING_PROOF = "FETCHING_PROOF"
    BUILDING = "BUILDING"
    SUBMITTING = "SUBMITTING"
    DONE = "DONE"
    FAILED = "FAILED"


class TransferService:
    """Transfers compressed assets owned by the connection's credential.

    Stateless between calls; safe to share across threads. Concurrent
    transfers of the same asset are not coordinated: at most one can
    land, the others fail at submission with a stale proof.
    """

    def __init__(
        self,
        connection: ConnectionContext,
        builder: TransactionBuilder,
        rpc: RpcClient | None = None,
    ) -> None:
        self._connection = connection
        self._builder = builder
        self._rpc = rpc or JsonRpcClient(connection)

    def transfer(self, asset_id: str, to_address: str) -> Outcome[str]:
        """Transfer ``asset_id`` to ``to_address``.

        Returns:
            Ok(signature) once the node accepted the transaction, or Err
            with the failing stage in ``context["stage"]``.
        """
        logger.debug("transfer %s -> %s: %s", asset_id, to_address, TransferStage.VALIDATING)

        problem = _validate_arguments(asset_id, to_address)
        if problem is not None:
            return _fail(
                TransferStage.VALIDATING,
                OperationError(kind=ErrorKind.INVALID_ARGUMENT, detail=problem),
                asset_id,
                to_address,
            )

        credential = self._connection.credential()
        if isinstance(credential, Err):
            return _fail(TransferStage.VALIDATING, credential.error, asset_id, to_address)

        try:
            our_address = derive_address(credential.value)
        except ValueError as exc:
            return _fail(
                TransferStage.VALIDATING,
                OperationError(
                    kind=ErrorKind.INVALID_ARGUMENT,
                    detail=f"cannot derive an address from the connection credential: {exc}",
                ),
                asset_id,
                to_address,
            )

        # -- FETCHING_ASSET -----------------------------------------------
        stage = TransferStage.FETCHING_ASSET
        logger.debug("transfer %s: %s", asset_id, stage)
        record = self._fetch_asset(asset_id)
        if isinstance(record, Err):
            return _fail(stage, record.error, asset_id, to_address)
        asset = record.value

        # -- VERIFYING_OWNERSHIP ------------------------------------------
        stage = TransferStage.VERIFYING_OWNERSHIP
        logger.debug("transfer %s: %s", asset_id, stage)
        if asset.owner != our_address:
            return _fail(
                stage,
                OperationError(
                    kind=ErrorKind.NOT_OWNER,
                    detail=(
                        f"asset is owned by {asset.owner}, not {our_address}; "
                        "only assets owned by the connection credential can be transferred"
                    ),
                    context={"owner": asset.owner, "address": our_address},
                ),
                asset_id,
                to_address,
            )

        # -- FETCHING_PROOF -----------------------------------------------
        stage = TransferStage.FETCHING_PROOF
        logger.debug("transfer %s: %s", asset_id, stage)
        fetched = self._fetch_proof(asset_id)
        if isinstance(fetched, Err):
            return _fail(stage, fetched.error, asset_id, to_address)
        proof = fetched.value

        try:
            compression: CompressionInfo = asset.compression_info()
        except ValueError as exc:
            return _fail(
                stage,
                OperationError(
                    kind=ErrorKind.NOT_COMPRESSED,
                    detail=(
                        f"{exc}; the asset is not a compressed asset or the "
                        "response is not in the expected format"
                    ),
                ),
                asset_id,
                to_address,
            )

        # -- BUILDING -----------------------------------------------------
        stage = TransferStage.BUILDING
        logger.debug(
            "transfer %s: %s (tree %s, leaf %d)",
            asset_id,
            stage,
            compression.tree_address,
            compression.leaf_id,
        )
        try:
            tx_bytes = self._builder.build_transfer(
                credential.value,
                to_address,
                asset_id,
                compression.leaf_id,
                compression.data_hash,
                compression.creator_hash,
                proof.root,
                proof.proof_path,
                compression.tree_address,
            )
        except Exception as exc:
            return _fail(
                stage,
                OperationError(
                    kind=ErrorKind.BUILD_FAILED,
                    detail=f"failed to build transfer transaction: {exc}",
                ),
                asset_id,
                to_address,
            )

        # -- SUBMITTING ---------------------------------------------------
        stage = TransferStage.SUBMITTING
        logger.debug("transfer %s: %s", asset_id, stage)
        submitted = self._rpc.submit(tx_bytes)
        if isinstance(submitted, Err):
            extra: dict[str, Any] = {}
            hint = transfer_failure_hint(submitted.error)
            if hint is not None:
                extra["hint"] = hint
            return _fail(
                stage,
                OperationError(
                    kind=ErrorKind.SUBMIT_FAILED,
                    detail=(
                        "transfer transaction failed; the wallet may lack funds for "
                        "fees, the proof may be stale because the tree changed since "
                        "it was fetched, or the asset may have been transferred "
                        "concurrently. Call transfer() again to re-fetch asset and proof"
                    ),
                    cause=submitted.error,
                    context=extra,
                ),
                asset_id,
                to_address,
            )

        logger.debug("transfer %s: %s (%s)", asset_id, TransferStage.DONE, submitted.value)
        return Ok(submitted.value)

    # -----------------------------------------------------------------
    # RPC steps
    # -----------------------------------------------------------------

    def _fetch_asset(self, asset_id: str) -> Outcome[AssetRecord]:
        response = self._rpc.get_asset_batch([asset_id])
        if isinstance(response, Err):
            return response
        body = response.value

        payload_error = _payload_error(body, "getAssetBatch")
        if payload_error is not None:
            return Err(payload_error)

        result = body.get("result") if isinstance(body, dict) else None
        if not isinstance(result, list) or not result or result[0] is None:
            return Err(
                OperationError(
                    kind=ErrorKind.ASSET_NOT_FOUND,
                    detail=(
                        "asset lookup returned no record; check the asset id and "
                        "that the endpoint supports the DAS API"
                    ),
                )
            )

        try:
            return Ok(AssetRecord.from_das(result[0], asset_id))
        except ValueError as exc:
            return Err(
                OperationError(
                    kind=ErrorKind.MALFORMED_RESPONSE,
                    detail=f"unexpected asset record format: {exc}",
                )
            )

    def _fetch_proof(self, asset_id: str) -> Outcome[AssetProof]:
        response = self._rpc.get_asset_proof_batch([asset_id])
        if isinstance(response, Err):
            return response
        body = response.value

        payload_error = _payload_error(body, "getAssetProofBatch")
        if payload_error is not None:
            return Err(payload_error)

        result = body.get("result") if isinstance(body, dict) else None
        try:
            return Ok(AssetProof.from_das(result, asset_id))
        except ValueError as exc:
            return Err(
                OperationError(
                    kind=ErrorKind.PROOF_UNAVAILABLE,
                    detail=f"asset proof could not be retrieved: {exc}",
                )
            )


# =====================================================================
# Helpers (pure)
# =====================================================================


def _validate_arguments(asset_id: object, to_address: object) -> str | None:
    """Return a problem description, or None if both arguments are usable."""
    if not isinstance(asset_id, str) or not asset_id.strip():
        return "asset id must be a non-empty string"
    if not isinstance(to_address, str) or not to_address.strip():
        return "recipient address must be a non-empty base58 string"
    if not is_base58_address(to_address):
        return (
            "recipient address must be base58 (letters and digits excluding "
            f"0, O, I and l), got: {to_address!r}"
        )
    return None


def _payload_error(body: Any, method: str) -> OperationError | None:
    """RPC_PAYLOAD_ERROR for a body carrying a JSON-RPC ``error`` member."""
    if isinstance(body, dict) and body.get("error") is not None:
        return OperationError(
            kind=ErrorKind.RPC_PAYLOAD_ERROR,
            detail=f"{method} returned an error",
            payload=body["error"],
            context={"method": method},
        )
    return None


def _fail(
    stage: TransferStage,
    error: OperationError,
    asset_id: object,
    to_address: object,
) -> Err:
    logger.warning("transfer %s failed at %s: %s", asset_id, stage, error.kind)
    return Err(
        error.with_context(
            stage=str(stage),
            asset_id=asset_id,
            to_address=to_address,
        )
    )
