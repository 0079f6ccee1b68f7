"""
Mint workflow.

Sequence:
    credential -> build_mint -> submit

Name, symbol, uri and addresses are passed to the builder untouched;
whatever validation exists is the builder's. Every failure carries the
mint parameters in ``context`` so the caller can tell which mint broke.
"""

from __future__ import annotations

import logging
from typing import Any

from bubblegum_client.builder import TransactionBuilder
from bubblegum_client.connection import ConnectionContext
from bubblegum_client.errors import ErrorKind, OperationError
from bubblegum_client.outcome import Err, Ok, Outcome
from bubblegum_client.rpc.client import RpcClient
from bubblegum_client.rpc.jsonrpc_client import JsonRpcClient

logger = logging.getLogger(__name__)


class MintService:
    """Mints compressed assets into an existing tree."""

    def __init__(
        self,
        connection: ConnectionContext,
        builder: TransactionBuilder,
        rpc: RpcClient | None = None,
    ) -> None:
        self._connection = connection
        self._builder = builder
        self._rpc = rpc or JsonRpcClient(connection)

    def mint(
        self,
        tree_address: str,
        name: str,
        symbol: str,
        uri: str,
        creator_address: str,
        royalty_share: int | str,
    ) -> Outcome[str]:
        """Mint one compressed asset.

        Args:
            tree_address: Tree to mint into (from TreeService.create_tree).
            name: Asset name.
            symbol: Asset symbol.
            uri: Off-chain metadata URI.
            creator_address: Creator receiving royalties.
            royalty_share: Royalty in basis points (e.g. 500 for 5%).

        Returns:
            Ok(signature), or Err with NOT_INITIALIZED, BUILD_FAILED or
            SUBMIT_FAILED (RPC error in ``cause``).
        """
        params: dict[str, Any] = {
            "tree_address": tree_address,
            "name": name,
            "symbol": symbol,
            "uri": uri,
            "creator_address": creator_address,
            "royalty_share": royalty_share,
        }

        credential = self._connection.credential()
        if isinstance(credential, Err):
            return Err(credential.error.with_context(**params))

        try:
            tx_bytes = self._builder.build_mint(
                credential.value,
                tree_address,
                name,
                symbol,
                uri,
                creator_address,
                royalty_share,
            )
        except Exception as exc:
            logger.warning("mint build failed for tree %s: %s", tree_address, exc)
            return Err(
                OperationError(
                    kind=ErrorKind.BUILD_FAILED,
                    detail=f"failed to build mint transaction: {exc}",
                    context=params,
                )
            )

        submitted = self._rpc.submit(tx_bytes)
        if isinstance(submitted, Err):
            logger.warning(
                "mint into tree %s failed: %s", tree_address, submitted.error.kind
            )
            return Err(
                OperationError(
                    kind=ErrorKind.SUBMIT_FAILED,
                    detail=(
                        "mint transaction failed; common causes are insufficient "
                        "funds for fees, an invalid tree address, or RPC issues"
                    ),
                    cause=submitted.error,
                    context=params,
                )
            )

        logger.debug("minted %r into tree %s: %s", name, tree_address, submitted.value)
        return Ok(submitted.value)
