"""
bubblegum-client: orchestration and RPC layer for compressed NFTs.

One connection context, three workflows:
- create a Merkle tree
- mint a compressed asset into it
- transfer a compressed asset (ownership check, proof lookup, submit)

Transaction encoding and signing are delegated to an injected
TransactionBuilder. Every operation returns ``Ok`` or ``Err``; nothing
retries.
"""

import logging

__version__ = "0.1.0"

from bubblegum_client.assets import AssetProof, AssetRecord, CompressionInfo
from bubblegum_client.builder import CreateTreeBuild, TransactionBuilder
from bubblegum_client.connection import ConnectionContext, ConnectionState
from bubblegum_client.errors import ErrorKind, OperationError
from bubblegum_client.keys import BASE58_ALPHABET, derive_address, is_base58_address
from bubblegum_client.mint import MintService
from bubblegum_client.outcome import Err, Ok, Outcome
from bubblegum_client.rpc import (
    HttpxTransport,
    JsonRpcClient,
    JsonRpcTransport,
    RpcClient,
)
from bubblegum_client.transfer import TransferService, TransferStage
from bubblegum_client.tree import TreeService

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BASE58_ALPHABET",
    "AssetProof",
    "AssetRecord",
    "CompressionInfo",
    "ConnectionContext",
    "ConnectionState",
    "CreateTreeBuild",
    "Err",
    "ErrorKind",
    "HttpxTransport",
    "JsonRpcClient",
    "JsonRpcTransport",
    "MintService",
    "Ok",
    "OperationError",
    "Outcome",
    "RpcClient",
    "TransactionBuilder",
    "TransferService",
    "TransferStage",
    "TreeService",
    "derive_address",
    "is_base58_address",
]
