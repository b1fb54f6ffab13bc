"""
Ed25519 keypairs.

Private material is the 32-byte seed (the SLIP-0010 output for derived
keys); libsodium expands it to the 64-byte signing key.  Ed25519 signs the
32-byte intent digest directly.
"""

from __future__ import annotations

import hmac
import logging

from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import SigningKey, VerifyKey

from suikeys_core import signing
from suikeys_core.derivation_path import DerivationPath
from suikeys_core.errors import BackendError, InvalidInputError, PathError, VerificationError
from suikeys_core.hd import slip10_derive_path
from suikeys_core.scheme import Scheme, address_from_public_key

logger = logging.getLogger("suikeys.ed25519")

SCHEME = Scheme.ED25519
SEED_SIZE = 32
PUBLIC_KEY_SIZE = 32
SIGNATURE_SIZE = 64
ENVELOPE_SIZE = 1 + SIGNATURE_SIZE + PUBLIC_KEY_SIZE


class Ed25519Keypair:
    """An immutable Ed25519 keypair."""

    __slots__ = ("_signing_key", "_public_key", "_chain_code", "_path")

    def __init__(
        self,
        signing_key: SigningKey,
        chain_code: bytes | None = None,
        path: DerivationPath | None = None,
    ):
        self._signing_key = signing_key
        self._public_key = bytes(signing_key.verify_key)
        self._chain_code = chain_code
        self._path = path

    # ---- factory methods ----

    @classmethod
    def generate(cls) -> Ed25519Keypair:
        return cls(SigningKey.generate())

    @classmethod
    def from_secret_key(cls, seed: bytes) -> Ed25519Keypair:
        """Rebuild the keypair from its 32-byte seed."""
        if len(seed) != SEED_SIZE:
            raise InvalidInputError(f"ed25519: invalid secret key length {len(seed)}")
        try:
            return cls(SigningKey(bytes(seed)))
        except CryptoError as exc:
            raise BackendError(f"ed25519: {exc}") from exc

    @classmethod
    def derive(cls, seed: bytes, path: DerivationPath) -> Ed25519Keypair:
        """Walk the SLIP-0010 hardened path from a BIP-39 seed."""
        path.validate_for_scheme(SCHEME)
        if not path.is_fully_hardened:
            raise PathError("ed25519: slip-0010 only supports hardened segments")
        key, chain = slip10_derive_path(seed, path.segments)
        logger.debug("derived ed25519 keypair at %s", path)
        return cls(SigningKey(key), chain_code=chain, path=path)

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
        """Return a copy of the 32-byte seed; the caller owns the buffer."""
        return bytes(self._signing_key)

    # ---- signing ----

    def sign_digest(self, digest: bytes) -> bytes:
        return bytes(self._signing_key.sign(bytes(digest)).signature)

    def sign_personal_message(self, message: bytes) -> bytes:
        return signing.sign_personal_message(SCHEME, message, self._public_key, self.sign_digest)

    def sign_transaction(self, tx_bytes: bytes) -> bytes:
        return signing.sign_transaction(SCHEME, tx_bytes, self._public_key, self.sign_digest)

    def verify_personal_message(self, message: bytes, signature: bytes) -> None:
        verify_personal_message(self._public_key, message, signature)

    def __repr__(self) -> str:
        return f"Ed25519Keypair({self.address})"


def verify_digest(public_key: bytes, digest: bytes, signature: bytes) -> None:
    """Check a serialized ``0x00 || sig || pubkey`` signature over *digest*."""
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise InvalidInputError(f"ed25519: invalid public key length {len(public_key)}")
    if len(signature) != ENVELOPE_SIZE:
        raise InvalidInputError(f"ed25519: invalid signature length {len(signature)}")
    if signature[0] != SCHEME.flag():
        raise InvalidInputError(f"ed25519: unexpected signature flag 0x{signature[0]:02x}")
    if not hmac.compare_digest(bytes(signature[1 + SIGNATURE_SIZE:]), bytes(public_key)):
        raise InvalidInputError("ed25519: mismatched public key")

    raw_sig = bytes(signature[1:1 + SIGNATURE_SIZE])
    try:
        VerifyKey(bytes(public_key)).verify(bytes(digest), raw_sig)
    except BadSignatureError:
        logger.debug("ed25519 signature rejected")
        raise VerificationError("ed25519: verification failed") from None
    except CryptoError as exc:
        raise BackendError(f"ed25519: {exc}") from exc


def verify_personal_message(public_key: bytes, message: bytes, signature: bytes) -> None:
    signing.verify_personal_message(
        SCHEME, message, signature,
        lambda digest, sig: verify_digest(public_key, digest, sig),
    )
