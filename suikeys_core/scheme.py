"""
Signature schemes supported by the chain and address derivation.

An address is ``"0x" + hex(blake2b-256(flag || public_key))``.
"""

from __future__ import annotations

import hashlib
from enum import IntEnum

from suikeys_core.errors import InvalidInputError, UnsupportedSchemeError

ADDRESS_LENGTH = 32
FLAG_UNSPECIFIED = 0xFF


class Scheme(IntEnum):
    """Signature scheme; the integer value is the address flag byte."""

    ED25519 = 0x00
    SECP256K1 = 0x01
    SECP256R1 = 0x02

    def flag(self) -> int:
        return int(self.value)

    def purpose(self) -> int:
        """BIP-44 style purpose used in derivation paths."""
        return _PURPOSES[self]

    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_flag(cls, flag: int) -> Scheme:
        try:
            return cls(flag)
        except ValueError:
            raise UnsupportedSchemeError(f"unknown scheme flag 0x{flag & 0xFF:02x}") from None

    @classmethod
    def from_label(cls, label: str) -> Scheme:
        for scheme in cls:
            if scheme.label() == label.strip().lower():
                return scheme
        raise UnsupportedSchemeError(f"unknown scheme {label!r}")


_PURPOSES = {
    Scheme.ED25519: 44,
    Scheme.SECP256K1: 54,
    Scheme.SECP256R1: 74,
}


def address_flag(scheme) -> int:
    """Flag byte for *scheme*, or ``0xff`` for anything unrecognised."""
    if isinstance(scheme, Scheme):
        return scheme.flag()
    try:
        return Scheme(scheme).flag()
    except ValueError:
        return FLAG_UNSPECIFIED


def address_from_public_key(scheme: Scheme, public_key: bytes) -> str:
    """Derive the chain address for *public_key* under *scheme*."""
    if not public_key:
        raise InvalidInputError("address: public key must not be empty")

    flag = address_flag(scheme)
    if flag == FLAG_UNSPECIFIED:
        raise UnsupportedSchemeError(f"address: unsupported scheme {scheme!r}")

    hasher = hashlib.blake2b(digest_size=ADDRESS_LENGTH)
    hasher.update(bytes([flag]))
    hasher.update(bytes(public_key))
    digest = hasher.digest()
    if len(digest) != ADDRESS_LENGTH:
        raise InvalidInputError(f"address: unexpected digest length {len(digest)}")

    return "0x" + digest.hex()
