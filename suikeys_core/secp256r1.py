"""
Secp256r1 (NIST P-256) keypairs.

Derivation follows the chain's reference tooling: the BIP-32 walk runs on
the secp256k1 group (k1 order for the modular add, k1 compressed public
keys for normal steps) and only the final scalar is reinterpreted as a
P-256 key.  That scalar must still lie in ``[1, n_p256)``.

Signatures are RFC 6979 deterministic ECDSA (see ``rfc6979``).
"""

from __future__ import annotations

import logging

from ecdsa import NIST256p, MalformedPointError, SigningKey

from suikeys_core import rfc6979, secp256k1, signing
from suikeys_core.derivation_path import DerivationPath
from suikeys_core.errors import BackendError, InvalidInputError, KeyRangeError
from suikeys_core.hd import PRIVATE_KEY_SIZE, bip32_derive_path
from suikeys_core.scheme import Scheme, address_from_public_key
from suikeys_core.utils import bytes_to_int

logger = logging.getLogger("suikeys.secp256r1")

SCHEME = Scheme.SECP256R1
CURVE = NIST256p
ORDER = NIST256p.order
HALF_ORDER = ORDER // 2
PUBLIC_KEY_SIZE = 33


def _signing_key(secret: bytes) -> SigningKey:
    if len(secret) != PRIVATE_KEY_SIZE:
        raise InvalidInputError(f"secp256r1: invalid secret key length {len(secret)}")
    d = bytes_to_int(secret)
    if not 0 < d < ORDER:
        raise KeyRangeError("secp256r1: private key out of range")
    try:
        return SigningKey.from_string(bytes(secret), curve=CURVE)
    except MalformedPointError as exc:
        raise BackendError(f"secp256r1: invalid private key: {exc}") from exc


def _k1_public_key(secret: bytes) -> bytes:
    try:
        return secp256k1.compressed_public_key(secret)
    except (InvalidInputError, KeyRangeError) as exc:
        raise KeyRangeError(f"secp256r1: invalid intermediate key: {exc}") from exc


class Secp256r1Keypair:
    """An immutable P-256 keypair."""

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
    def generate(cls) -> Secp256r1Keypair:
        return cls(SigningKey.generate(curve=CURVE))

    @classmethod
    def from_secret_key(cls, secret: bytes) -> Secp256r1Keypair:
        return cls(_signing_key(secret))

    @classmethod
    def derive(cls, seed: bytes, path: DerivationPath) -> Secp256r1Keypair:
        path.validate_for_scheme(SCHEME)
        key, chain = bip32_derive_path(seed, path.segments, _k1_public_key, secp256k1.ORDER)
        logger.debug("derived secp256r1 keypair at %s", path)
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
        return rfc6979.sign(self._signing_key.privkey.secret_multiplier, payload)

    def sign_personal_message(self, message: bytes) -> bytes:
        return signing.sign_personal_message(SCHEME, message, self._public_key, self.sign_digest)

    def sign_transaction(self, tx_bytes: bytes) -> bytes:
        return signing.sign_transaction(SCHEME, tx_bytes, self._public_key, self.sign_digest)

    def verify_personal_message(self, message: bytes, signature: bytes) -> None:
        verify_personal_message(self._public_key, message, signature)

    def __repr__(self) -> str:
        return f"Secp256r1Keypair({self.address})"


def verify_digest(public_key: bytes, digest: bytes, signature: bytes) -> None:
    vk = secp256k1.parse_public_key(public_key, CURVE, "secp256r1")
    rs = secp256k1.check_envelope(SCHEME, public_key, signature, ORDER)
    secp256k1.verify_ecdsa(vk, "secp256r1", digest, rs)


def verify_personal_message(public_key: bytes, message: bytes, signature: bytes) -> None:
    signing.verify_personal_message(
        SCHEME, message, signature,
        lambda digest, sig: verify_digest(public_key, digest, sig),
    )
