"""
Shared helpers: big-endian integers, buffer wiping, addresses, object
digests, object references and dynamic-field id derivation.
"""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass

import base58

from suikeys_core.bcs import serialize_bytes, serialize_u64
from suikeys_core.errors import InvalidInputError

DIGEST_LENGTH = 32
ADDRESS_HEX_LENGTH = 64
DYNAMIC_FIELD_HASH_PREFIX = 0xF0


# ===================================================================
#  Big-endian helpers
# ===================================================================

def int_to_bytes32(value: int) -> bytes:
    """Left-padded 32-byte big-endian encoding of *value*."""
    return value.to_bytes(32, "big")


def bytes_to_int(data: bytes) -> int:
    return int.from_bytes(data, "big")


def uint32_be(value: int) -> bytes:
    return struct.pack(">I", value)


def wipe(buf: bytearray) -> None:
    """Overwrite a mutable buffer with zeros."""
    for i in range(len(buf)):
        buf[i] = 0


# ===================================================================
#  Addresses
# ===================================================================

def normalize_address(text: str) -> str:
    """Return the full ``0x``-prefixed 64-hex-digit form of an address."""
    trimmed = text.strip().lower()
    if trimmed.startswith("0x"):
        trimmed = trimmed[2:]
    if not trimmed or len(trimmed) > ADDRESS_HEX_LENGTH:
        raise InvalidInputError(f"address: invalid address {text!r}")
    padded = trimmed.rjust(ADDRESS_HEX_LENGTH, "0")
    try:
        bytes.fromhex(padded)
    except ValueError:
        raise InvalidInputError(f"address: invalid address {text!r}") from None
    return "0x" + padded


def parse_address(text: str) -> bytes:
    """Decode an address (short form allowed) to its 32 raw bytes."""
    return bytes.fromhex(normalize_address(text)[2:])


# ===================================================================
#  Object digests and references
# ===================================================================

def parse_digest(text: str) -> bytes:
    """Decode a base58 object digest; it must be exactly 32 bytes."""
    try:
        decoded = base58.b58decode(text)
    except ValueError:
        raise InvalidInputError(f"digest: invalid object digest {text!r}") from None
    if len(decoded) != DIGEST_LENGTH:
        raise InvalidInputError(f"digest: invalid object digest {text!r}")
    return decoded


def digest_to_string(digest: bytes) -> str:
    return base58.b58encode(digest).decode("ascii")


@dataclass(frozen=True)
class ObjectRef:
    """Reference to an owned object: (id, version, digest)."""
    object_id: bytes
    version: int
    digest: bytes

    def to_bcs(self) -> bytes:
        # digest is a length-prefixed vector on the wire
        return self.object_id + serialize_u64(self.version) + serialize_bytes(self.digest)

    def to_dict(self) -> dict:
        return {
            "objectId": "0x" + self.object_id.hex(),
            "version": self.version,
            "digest": digest_to_string(self.digest),
        }


def parse_object_ref(object_id: str, version: int, digest: str) -> ObjectRef:
    if version < 0 or version >= 1 << 64:
        raise InvalidInputError(f"object ref: version {version} out of range")
    return ObjectRef(parse_address(object_id), version, parse_digest(digest))


def parse_move_call_target(target: str) -> tuple[str, str, str]:
    """Split ``package::module::function``; every part must be non-empty."""
    parts = target.split("::")
    if len(parts) != 3 or not all(parts):
        raise InvalidInputError("move call target must be package::module::function")
    return parts[0], parts[1], parts[2]


# ===================================================================
#  Dynamic fields / derived objects
# ===================================================================

def derive_dynamic_field_id(parent_id: str, type_tag: str, key: bytes) -> str:
    """
    Object id of a dynamic field with BCS-encoded *key* of type *type_tag*
    under *parent_id*:

        blake2b-256(0xf0 || parent || u64_le(len(key)) || key || bcs(type_tag))
    """
    from suikeys_core.type_tag import parse_type_tag

    parent = parse_address(parent_id)
    tag = parse_type_tag(type_tag)

    hasher = hashlib.blake2b(digest_size=32)
    hasher.update(bytes([DYNAMIC_FIELD_HASH_PREFIX]))
    hasher.update(parent)
    hasher.update(serialize_u64(len(key)))
    hasher.update(key)
    hasher.update(tag.to_bcs())
    return "0x" + hasher.hexdigest()


def derive_object_id(parent_id: str, type_tag: str, key: bytes) -> str:
    """Id of a derived object keyed by ``DerivedObjectKey<type_tag>``."""
    from suikeys_core.type_tag import parse_type_tag

    normalized = str(parse_type_tag(type_tag))
    derived_type = f"0x2::derived_object::DerivedObjectKey<{normalized}>"
    return derive_dynamic_field_id(parent_id, derived_type, key)
