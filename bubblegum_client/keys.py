"""
Address validation and credential-to-address derivation.

Credentials are base58-encoded Ed25519 keypairs in one of two forms:
    - 64 bytes: ``seed (32) || public_key (32)`` (the common keypair export)
    - 32 bytes: bare seed

The address of a credential is the base58 encoding of its Ed25519 public
key. For the 64-byte form the embedded public key must match the one
computed from the seed; a mismatch means the credential is corrupt.
"""

from __future__ import annotations

import re

import base58
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

_BASE58_RE = re.compile(f"[{BASE58_ALPHABET}]+")

_SEED_LEN = 32
_KEYPAIR_LEN = 64


def is_base58_address(value: object) -> bool:
    """True if ``value`` is a non-empty string drawn from the base58 alphabet.

    Only the alphabet is checked (digits and letters excluding ``0``,
    ``O``, ``I`` and ``l``). Length and curve membership are left to the
    transaction builder.
    """
    return isinstance(value, str) and _BASE58_RE.fullmatch(value) is not None


def _public_key_bytes(seed: bytes) -> bytes:
    private_key = Ed25519PrivateKey.from_private_bytes(seed)
    return private_key.public_key().public_bytes(
        encoding=Encoding.Raw,
        format=PublicFormat.Raw,
    )


def derive_address(credential: str) -> str:
    """Derive the base58 public address controlled by ``credential``.

    Raises:
        ValueError: If the credential is not base58, has the wrong
            length, or embeds a public key that does not match its seed.
    """
    if not is_base58_address(credential):
        raise ValueError("credential is not a base58 string")

    raw = base58.b58decode(credential)
    if len(raw) not in (_SEED_LEN, _KEYPAIR_LEN):
        raise ValueError(
            f"credential must decode to {_SEED_LEN} or {_KEYPAIR_LEN} bytes, "
            f"got {len(raw)}"
        )

    public_key = _public_key_bytes(raw[:_SEED_LEN])
    if len(raw) == _KEYPAIR_LEN and raw[_SEED_LEN:] != public_key:
        raise ValueError("credential public key does not match its seed")

    return base58.b58encode(public_key).decode("ascii")
