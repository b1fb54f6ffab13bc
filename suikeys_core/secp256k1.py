"""
Secp256k1 keypairs.

Signing hashes the 32-byte intent digest once more with SHA-256 and
produces an RFC 6979 deterministic ECDSA signature, low-S normalised and
encoded as fixed-width ``r(32) || s(32)``.  Verification applies the same
extra SHA-256 so both sides stay compatible with the chain's tooling.
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from ecdsa import SECP256k1, BadSignatureError, MalformedPointError, SigningKey, VerifyingKey
from ecdsa.util import sigdecode_string, sigencode_string_canonize

from suikeys_core import signing
from suikeys_core.derivation_path import DerivationPath
from suikeys_core.errors import (
    BackendError,
    InvalidInputError,
    KeyRangeError,
    VerificationError,
)
from suikeys_core.hd import PRIVATE_KEY_SIZE, bip32_derive_path
from suikeys_core.scheme import Scheme, address_from_public_key
from suikeys_core.utils import bytes_to_int

logger = logging.getLogger("suikeys.secp256k1")

SCHEME = Scheme.SECP256K1
CURVE = SECP256k1
ORDER = SECP256k1.order
HALF_ORDER = ORDER // 2
PUBLIC_KEY_SIZE = 33
ENVELOPE_SIZE = 1 + 64 + PUBLIC_KEY_SIZE


def _signing_key(secret: bytes, label: str = "secp256k1") -> SigningKey:
    if len(secret) != PRIVATE_KEY_SIZE:
        raise InvalidInputError(f"{label}: invalid secret key length {len(secret)}")
    d = bytes_to_int(secret)
    if not 0 < d < ORDER:
        raise KeyRangeError(f"{label}: private key out of range")
    try:
        return SigningKey.from_string(bytes(secret), curve=CURVE)
    except MalformedPointError as exc:
        raise BackendError(f"{label}: {exc}") from exc


def compressed_public_key(secret: bytes) -> bytes:
    """Compressed SEC1 public key of a secp256k1 scalar (BIP-32 oracle)."""
    return _signing_key(secret).get_verifying_key().to_string("compressed")


class Secp256k1Keypair:
    """An immutable secp256k1 keypair."""

    __slots__ = ("_signing_key", "_public_key", "_chain_code", "_path")

    def __init__(
        self,
        signing_key: SigningKey,
        chain_code: bytes | None = None,
        path: DerivationPath | None = None,
    ):
        self._signing_key = signing_key
        self._public_key = signing_key.get_verifying_key().to_string("compressed")
        self._chain_code = chain_code
        self._path = path

    # ---- factory methods ----

    @classmethod
    def generate(cls) -> Secp256k1Keypair:
        return cls(SigningKey.generate(curve=CURVE))

    @classmethod
    def from_secret_key(cls, secret: bytes) -> Secp256k1Keypair:
        return cls(_signing_key(secret))

    @classmethod
    def derive(cls, seed: bytes, path: DerivationPath) -> Secp256k1Keypair:
        """Walk the BIP-32 path (hardened and normal steps) from a seed."""
        path.validate_for_scheme(SCHEME)
        key, chain = bip32_derive_path(seed, path.segments, compressed_public_key, ORDER)
        logger.debug("derived secp256k1 keypair at %s", path)
        return cls(_signing_key(key), chain_code=chain, path=path)

    # ---- accessors ----

    @property
    def scheme(self) -> Scheme:
        return SCHEME

    @property
    def public_key(self) -> bytes:
        return self._public_key

    @property
    def address(self) -> str:
        return address_from_public_key(SCHEME, self._public_key)

    @property
    def path(self) -> DerivationPath | None:
        return self._path

    def export_secret(self) -> bytes:
        return self._signing_key.to_string()

    # ---- signing ----

    def sign_digest(self, payload: bytes) -> bytes:
        """Low-S ``r || s`` over ``SHA-256(payload)``."""
        msg_hash = hashlib.sha256(payload).digest()
        try:
            return self._signing_key.sign_digest_deterministic(
                msg_hash,
                hashfunc=hashlib.sha256,
                sigencode=sigencode_string_canonize,
            )
        except RuntimeError as exc:
            raise BackendError(f"secp256k1: signing failed: {exc}") from exc

    def sign_personal_message(self, message: bytes) -> bytes:
        return signing.sign_personal_message(SCHEME, message, self._public_key, self.sign_digest)

    def sign_transaction(self, tx_bytes: bytes) -> bytes:
        return signing.sign_transaction(SCHEME, tx_bytes, self._public_key, self.sign_digest)

    def verify_personal_message(self, message: bytes, signature: bytes) -> None:
        verify_personal_message(self._public_key, message, signature)

    def __repr__(self) -> str:
        return f"Secp256k1Keypair({self.address})"


def parse_public_key(public_key: bytes, curve, label: str) -> VerifyingKey:
    try:
        return VerifyingKey.from_string(bytes(public_key), curve=curve)
    except (MalformedPointError, ValueError) as exc:
        raise InvalidInputError(f"{label}: invalid public key: {exc}") from exc


def check_envelope(
    scheme: Scheme, public_key: bytes, signature: bytes, order: int,
) -> bytes:
    """
    Validate an ECDSA envelope ``flag || r || s || pubkey`` and return the
    64-byte ``r || s`` body.  r and s must be below the curve order.
    """
    label = scheme.label()
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise InvalidInputError(f"{label}: invalid public key length {len(public_key)}")
    expected = 1 + 64 + len(public_key)
    if len(signature) != expected:
        raise InvalidInputError(f"{label}: invalid signature length {len(signature)}")
    if signature[0] != scheme.flag():
        raise InvalidInputError(f"{label}: unexpected signature flag 0x{signature[0]:02x}")
    if not hmac.compare_digest(bytes(signature[65:]), bytes(public_key)):
        raise InvalidInputError(f"{label}: mismatched public key")
    if bytes_to_int(signature[1:33]) >= order:
        raise InvalidInputError(f"{label}: invalid R component")
    if bytes_to_int(signature[33:65]) >= order:
        raise InvalidInputError(f"{label}: invalid S component")
    return bytes(signature[1:65])


def verify_ecdsa(vk: VerifyingKey, label: str, digest: bytes, rs: bytes) -> None:
    msg_hash = hashlib.sha256(digest).digest()
    try:
        vk.verify_digest(rs, msg_hash, sigdecode=sigdecode_string)
    except BadSignatureError:
        logger.debug("%s signature rejected", label)
        raise VerificationError(f"{label}: verification failed") from None


def verify_digest(public_key: bytes, digest: bytes, signature: bytes) -> None:
    vk = parse_public_key(public_key, CURVE, "secp256k1")
    rs = check_envelope(SCHEME, public_key, signature, ORDER)
    verify_ecdsa(vk, "secp256k1", digest, rs)


def verify_personal_message(public_key: bytes, message: bytes, signature: bytes) -> None:
    signing.verify_personal_message(
        SCHEME, message, signature,
        lambda digest, sig: verify_digest(public_key, digest, sig),
    )
