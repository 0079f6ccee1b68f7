"""
Tree creation workflow.

Sequence:
    credential -> build_create_tree -> submit

The tree address comes from the build step; the submit response only
carries a signature. A failed submit is classified through the marker
table in ``rpc/errors.py``:

    - INSUFFICIENT_FUNDS: not enough lamports for the tree account rent
      and fees. Fund the wallet and call again.
    - EXPIRED_BLOCKHASH: the transaction landed too late. Call again;
      the fresh build fetches a fresh blockhash. Resending the old bytes
      would fail the same way.
    - UNKNOWN_SUBMIT_FAILURE: anything else, including network and HTTP
      failures. The RPC-level error is kept in ``cause``.

No retries.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from bubblegum_client.builder import CreateTreeBuild, TransactionBuilder
from bubblegum_client.connection import ConnectionContext
from bubblegum_client.errors import ErrorKind, OperationError
from bubblegum_client.outcome import Err, Ok, Outcome
from bubblegum_client.rpc.client import RpcClient
from bubblegum_client.rpc.errors import classify_submit_failure
from bubblegum_client.rpc.jsonrpc_client import JsonRpcClient

logger = logging.getLogger(__name__)

_SUBMIT_GUIDANCE: dict[ErrorKind, str] = {
    ErrorKind.INSUFFICIENT_FUNDS: (
        "insufficient funds to create the Merkle tree; the wallet must cover "
        "the rent-exempt balance of the tree account plus the transaction fee"
    ),
    ErrorKind.EXPIRED_BLOCKHASH: (
        "transaction blockhash expired before it landed; call create_tree() "
        "again to build with a fresh blockhash"
    ),
    ErrorKind.UNKNOWN_SUBMIT_FAILURE: (
        "Merkle tree creation failed; check the connection and wallet "
        "balance, then try again"
    ),
}


def _not_initialized_guidance(error: OperationError) -> OperationError:
    return replace(
        error,
        detail=f"{error.detail}; a connection is required before creating a Merkle tree",
    )


class TreeService:
    """Creates Merkle trees for compressed assets.

    Args:
        connection: Initialized (or later-initialized) connection context.
        builder: Transaction builder for the tree-creation instructions.
        rpc: RPC client. Defaults to a JsonRpcClient over the context.
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

    def create_tree(self) -> Outcome[str]:
        """Create a new Merkle tree.

        Returns:
            Ok(tree_address) on successful submission.
            Err(NOT_INITIALIZED) if the context has no connection.
            Err(BUILD_FAILED) if the builder raised.
            Err(INSUFFICIENT_FUNDS | EXPIRED_BLOCKHASH |
            UNKNOWN_SUBMIT_FAILURE) if submission failed.
        """
        credential = self._connection.credential()
        if isinstance(credential, Err):
            return Err(_not_initialized_guidance(credential.error))

        try:
            build: CreateTreeBuild = self._builder.build_create_tree(credential.value)
        except Exception as exc:
            logger.warning("tree build failed: %s", exc)
            return Err(
                OperationError(
                    kind=ErrorKind.BUILD_FAILED,
                    detail=(
                        f"failed to build Merkle tree configuration transaction: {exc}; "
                        "verify the credential is a valid keypair"
                    ),
                )
            )

        logger.debug("built tree creation for %s", build.tree_address)

        submitted = self._rpc.submit(build.tx_bytes)
        if isinstance(submitted, Err):
            kind = classify_submit_failure(submitted.error)
            logger.warning(
                "tree creation for %s failed: %s (%s)",
                build.tree_address,
                kind,
                submitted.error.kind,
            )
            return Err(
                OperationError(
                    kind=kind,
                    detail=_SUBMIT_GUIDANCE[kind],
                    cause=submitted.error,
                    context={"tree_address": build.tree_address},
                )
            )

        logger.debug(
            "tree %s created, signature %s", build.tree_address, submitted.value
        )
        return Ok(build.tree_address)
