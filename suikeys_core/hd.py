"""
Hierarchical deterministic key derivation.

  - BIP-32 (ECDSA curves): master from HMAC-SHA512("Bitcoin seed", seed);
    children by modular addition on the curve order.  Hardened and normal
    steps are supported; normal steps need the parent's compressed public
    key, supplied by the caller as ``pubkey_of``.
  - SLIP-0010 (Ed25519): master from HMAC-SHA512("ed25519 seed", seed);
    hardened children only, no modular arithmetic.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Callable

from suikeys_core.derivation_path import PathSegment
from suikeys_core.errors import KeyRangeError, PathError
from suikeys_core.utils import bytes_to_int, int_to_bytes32, uint32_be, wipe

PRIVATE_KEY_SIZE = 32
BIP32_MASTER_KEY = b"Bitcoin seed"
SLIP10_ED25519_KEY = b"ed25519 seed"


def hmac_sha512(key: bytes, data: bytes) -> bytes:
    return hmac.new(key, data, hashlib.sha512).digest()


def _split32(digest: bytes) -> tuple[bytes, bytes]:
    return digest[:PRIVATE_KEY_SIZE], digest[PRIVATE_KEY_SIZE:]


# ===================================================================
#  BIP-32
# ===================================================================

def bip32_master_key(seed: bytes) -> tuple[bytes, bytes]:
    """Return ``(master_key, chain_code)`` for an ECDSA curve."""
    return _split32(hmac_sha512(BIP32_MASTER_KEY, seed))


def derive_child_private_key(
    parent_key: bytes,
    parent_chain: bytes,
    segment: PathSegment,
    pubkey_of: Callable[[bytes], bytes],
    order: int,
) -> tuple[bytes, bytes]:
    """
    One BIP-32 child step.  Returns ``(child_key, child_chain)``.

    Raises ``KeyRangeError`` when IL >= order or the child scalar is zero;
    callers may retry with the next index.
    """
    if segment.hardened:
        data = bytearray(b"\x00")
        data += parent_key
    else:
        data = bytearray(pubkey_of(parent_key))
    data += uint32_be(segment.hardened_index)

    digest = bytearray(hmac_sha512(parent_chain, bytes(data)))
    wipe(data)
    try:
        il = bytes_to_int(digest[:PRIVATE_KEY_SIZE])
        if il >= order:
            raise KeyRangeError("bip32: derived IL >= curve order")
        child = (il + bytes_to_int(parent_key)) % order
        if child == 0:
            raise KeyRangeError("bip32: derived zero key")
        return int_to_bytes32(child), bytes(digest[PRIVATE_KEY_SIZE:])
    finally:
        wipe(digest)


def bip32_derive_path(
    seed: bytes,
    segments,
    pubkey_of: Callable[[bytes], bytes],
    order: int,
) -> tuple[bytes, bytes]:
    """Walk *segments* from the BIP-32 master of *seed*."""
    key, chain = bip32_master_key(seed)
    for segment in segments:
        key, chain = derive_child_private_key(key, chain, segment, pubkey_of, order)
    return key, chain


# ===================================================================
#  SLIP-0010 (Ed25519)
# ===================================================================

def slip10_master_key(seed: bytes) -> tuple[bytes, bytes]:
    return _split32(hmac_sha512(SLIP10_ED25519_KEY, seed))


def slip10_derive_child(
    parent_key: bytes, parent_chain: bytes, segment: PathSegment,
) -> tuple[bytes, bytes]:
    """Hardened-only child: HMAC over ``0x00 || key || index|0x80000000``."""
    if not segment.hardened:
        raise PathError("ed25519: slip-0010 only supports hardened segments")
    data = bytearray(b"\x00")
    data += parent_key
    data += uint32_be(segment.hardened_index)
    try:
        return _split32(hmac_sha512(parent_chain, bytes(data)))
    finally:
        wipe(data)


def slip10_derive_path(seed: bytes, segments) -> tuple[bytes, bytes]:
    key, chain = slip10_master_key(seed)
    for segment in segments:
        key, chain = slip10_derive_child(key, chain, segment)
    return key, chain
