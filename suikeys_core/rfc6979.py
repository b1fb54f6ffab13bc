"""
RFC 6979 deterministic ECDSA over NIST P-256 with SHA-256.

The nonce comes from the HMAC-DRBG described in RFC 6979 section 3.2,
seeded with the private scalar and ``H = SHA-256(payload)``.  Candidates
outside ``[1, n)`` and those giving ``r == 0`` or ``s == 0`` are skipped
by re-keying the DRBG.  The final ``s`` is low-S normalised.

Callers pass the 32-byte intent digest as *payload*; it is hashed once
more here, matching the chain's reference signer.
"""

from __future__ import annotations

import hashlib
import hmac
from contextlib import closing
from typing import Iterator

from ecdsa import NIST256p

from suikeys_core.errors import KeyRangeError
from suikeys_core.utils import bytes_to_int, wipe

CURVE = NIST256p
ORDER = NIST256p.order
QLEN = ORDER.bit_length()
ROLEN = (QLEN + 7) // 8


def _hmac_sha256(key: bytes, *parts: bytes) -> bytes:
    mac = hmac.new(bytes(key), digestmod=hashlib.sha256)
    for part in parts:
        mac.update(part)
    return mac.digest()


def _int2octets(x: int) -> bytes:
    return x.to_bytes(ROLEN, "big")


def bits2int(b: bytes) -> int:
    i = bytes_to_int(b)
    blen = len(b) * 8
    if blen > QLEN:
        i >>= blen - QLEN
    return i


def _bits2octets(b: bytes) -> bytes:
    return _int2octets(bits2int(b) % ORDER)


class _HmacDrbg:
    """RFC 6979 section 3.2 generator state (K, V)."""

    def __init__(self, secret: int, msg_hash: bytes):
        x = bytearray(_int2octets(secret))
        h1 = _bits2octets(msg_hash)
        self.v = bytearray(b"\x01" * 32)
        self.k = bytearray(32)
        self._update(b"\x00", x, h1)
        self._update(b"\x01", x, h1)
        wipe(x)

    def _update(self, sep: bytes, x: bytes, h1: bytes) -> None:
        self.k[:] = _hmac_sha256(self.k, self.v, sep, x, h1)
        self.v[:] = _hmac_sha256(self.k, self.v)

    def candidate(self) -> int:
        t = b""
        while len(t) < ROLEN:
            self.v[:] = _hmac_sha256(self.k, self.v)
            t += bytes(self.v)
        return bits2int(t[:ROLEN])

    def reseed(self) -> None:
        self.k[:] = _hmac_sha256(self.k, self.v, b"\x00")
        self.v[:] = _hmac_sha256(self.k, self.v)

    def clear(self) -> None:
        wipe(self.k)
        wipe(self.v)


def nonces(secret: int, msg_hash: bytes) -> Iterator[int]:
    """Yield the in-range RFC 6979 nonces for *secret* and *msg_hash* in order."""
    drbg = _HmacDrbg(secret, msg_hash)
    try:
        while True:
            k = drbg.candidate()
            if 0 < k < ORDER:
                yield k
            drbg.reseed()
    finally:
        drbg.clear()


def generate_k(secret: int, msg_hash: bytes) -> int:
    """First in-range RFC 6979 nonce, as published in the RFC's test vectors."""
    with closing(nonces(secret, msg_hash)) as candidates:
        return next(candidates)


def sign(secret: int, payload: bytes) -> bytes:
    """Deterministic low-S ``r(32) || s(32)`` over ``SHA-256(payload)``."""
    if not 0 < secret < ORDER:
        raise KeyRangeError("secp256r1: private key out of range")
    msg_hash = hashlib.sha256(payload).digest()
    e = bits2int(msg_hash) % ORDER

    with closing(nonces(secret, msg_hash)) as candidates:
        for k in candidates:
            r = (CURVE.generator * k).x() % ORDER
            if r == 0:
                continue
            s = pow(k, -1, ORDER) * (e + r * secret) % ORDER
            if s == 0:
                continue
            if s > ORDER // 2:
                s = ORDER - s
            return _int2octets(r) + _int2octets(s)
    raise AssertionError("unreachable")
