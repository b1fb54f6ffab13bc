"""
Keypair facade.

Dispatches by scheme to ``Ed25519Keypair``, ``Secp256k1Keypair`` and
``Secp256r1Keypair`` and handles the chain's bech32 private-key format:
HRP ``suiprivkey`` over the 33-byte payload ``flag || secret``.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Protocol, Union

import bech32

from suikeys_core import ed25519, secp256k1, secp256r1
from suikeys_core.derivation_path import DerivationPath, default_derivation_path
from suikeys_core.ed25519 import Ed25519Keypair
from suikeys_core.errors import InvalidInputError, UnsupportedSchemeError
from suikeys_core.hd import PRIVATE_KEY_SIZE
from suikeys_core.mnemonic import mnemonic_to_seed
from suikeys_core.scheme import Scheme
from suikeys_core.secp256k1 import Secp256k1Keypair
from suikeys_core.secp256r1 import Secp256r1Keypair

logger = logging.getLogger("suikeys.keypair")

PRIVATE_KEY_HRP = "suiprivkey"
BECH32_PAYLOAD_SIZE = 1 + PRIVATE_KEY_SIZE


class Keypair(Protocol):
    """Surface shared by every concrete keypair."""

    @property
    def scheme(self) -> Scheme: ...

    @property
    def public_key(self) -> bytes: ...

    @property
    def address(self) -> str: ...

    def export_secret(self) -> bytes: ...

    def sign_personal_message(self, message: bytes) -> bytes: ...

    def sign_transaction(self, tx_bytes: bytes) -> bytes: ...

    def verify_personal_message(self, message: bytes, signature: bytes) -> None: ...


AnyKeypair = Union[Ed25519Keypair, Secp256k1Keypair, Secp256r1Keypair]

_KEYPAIR_TYPES = {
    Scheme.ED25519: Ed25519Keypair,
    Scheme.SECP256K1: Secp256k1Keypair,
    Scheme.SECP256R1: Secp256r1Keypair,
}

_VERIFIERS = {
    Scheme.ED25519: ed25519.verify_personal_message,
    Scheme.SECP256K1: secp256k1.verify_personal_message,
    Scheme.SECP256R1: secp256r1.verify_personal_message,
}


def _keypair_type(scheme: Scheme, op: str):
    try:
        return _KEYPAIR_TYPES[scheme]
    except (KeyError, TypeError):
        raise UnsupportedSchemeError(f"{op}: unsupported scheme {scheme!r}") from None


# ===================================================================
#  Construction
# ===================================================================

def generate(scheme: Scheme) -> AnyKeypair:
    """Create a fresh random keypair for *scheme*."""
    return _keypair_type(scheme, "generate").generate()


def from_secret_key(scheme: Scheme, secret: bytes) -> AnyKeypair:
    """Rebuild a keypair from its raw 32-byte secret."""
    return _keypair_type(scheme, "from secret").from_secret_key(secret)


def from_hex_secret(scheme: Scheme, secret_hex: str) -> AnyKeypair:
    text = secret_hex.strip().lower()
    if text.startswith("0x"):
        text = text[2:]
    try:
        secret = bytes.fromhex(text)
    except ValueError:
        raise InvalidInputError("from secret: secret is not valid hex") from None
    return from_secret_key(scheme, secret)


def derive_from_mnemonic(
    scheme: Scheme, mnemonic: str, passphrase: str = "", path: str | None = None,
) -> AnyKeypair:
    """
    Derive a keypair from a BIP-39 phrase.

    *path* defaults to the recommended path for the scheme
    (``m/44'/784'/0'/0'/0'``, ``m/54'/784'/0'/0/0``, ``m/74'/784'/0'/0/0``).
    """
    keypair_type = _keypair_type(scheme, "derive")
    if path is None:
        parsed = default_derivation_path(scheme)
    else:
        parsed = DerivationPath.parse(path)
    seed = mnemonic_to_seed(mnemonic, passphrase)
    return keypair_type.derive(seed, parsed)


# ===================================================================
#  Bech32 private keys
# ===================================================================

@dataclass(frozen=True)
class ParsedPrivateKey:
    scheme: Scheme
    secret_key: bytes


def encode_private_key(scheme: Scheme, secret: bytes) -> str:
    if len(secret) != PRIVATE_KEY_SIZE:
        raise InvalidInputError(
            f"bech32: expected {PRIVATE_KEY_SIZE} secret bytes, got {len(secret)}"
        )
    _keypair_type(scheme, "bech32")
    payload = bytes([Scheme(scheme).flag()]) + bytes(secret)
    data = bech32.convertbits(payload, 8, 5, True)
    return bech32.bech32_encode(PRIVATE_KEY_HRP, data)


def decode_private_key(encoded: str) -> ParsedPrivateKey:
    hrp, data = bech32.bech32_decode(encoded.strip())
    if hrp is None or data is None:
        raise InvalidInputError("bech32: invalid encoding or checksum")
    if hrp != PRIVATE_KEY_HRP:
        raise InvalidInputError(f"bech32: unexpected prefix {hrp!r}")
    payload = bech32.convertbits(data, 5, 8, False)
    if payload is None or len(payload) != BECH32_PAYLOAD_SIZE:
        raise InvalidInputError("bech32: invalid private key payload length")
    scheme = Scheme.from_flag(payload[0])
    return ParsedPrivateKey(scheme, bytes(payload[1:]))


def from_bech32(encoded: str) -> AnyKeypair:
    """Import a ``suiprivkey1...`` string."""
    parsed = decode_private_key(encoded)
    logger.debug("importing %s keypair from bech32", parsed.scheme.label())
    return from_secret_key(parsed.scheme, parsed.secret_key)


def to_bech32(scheme: Scheme, secret: bytes) -> str:
    return encode_private_key(scheme, secret)


def to_bech32_from_keypair(keypair: Keypair) -> str:
    if keypair is None:
        raise InvalidInputError("export: missing keypair")
    return encode_private_key(keypair.scheme, keypair.export_secret())


# ===================================================================
#  Public keys and verification
# ===================================================================

def public_key_base64(scheme: Scheme, public_key: bytes) -> str:
    """Base64 of ``flag || public_key``."""
    flag = Scheme.from_flag(int(scheme)).flag()
    return base64.b64encode(bytes([flag]) + bytes(public_key)).decode("ascii")


def verify_personal_message(
    scheme: Scheme, public_key: bytes, message: bytes, signature: bytes,
) -> None:
    """Verify a serialized personal-message signature; raises on failure."""
    try:
        verifier = _VERIFIERS[scheme]
    except (KeyError, TypeError):
        raise UnsupportedSchemeError(
            f"verify personal message: unsupported scheme {scheme!r}"
        ) from None
    verifier(public_key, message, signature)
