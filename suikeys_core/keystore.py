"""
Passphrase-encrypted keypair export.

The secret is stored as ``flag || secret32`` under AES-256-GCM with a key
stretched by PBKDF2-HMAC-SHA256.  The export is a JSON-compatible dict:

    {
        "version": 1,
        "scheme": "secp256k1",
        "address": "0x...",
        "public_key": "<hex>",
        "ciphertext": "<hex>",
        "nonce": "<hex>",
        "tag": "<hex>",
        "salt": "<hex>",
        "kdf": "pbkdf2-hmac-sha256",
        "kdf_iterations": 600000,
    }
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os

from Crypto.Cipher import AES

from suikeys_core import keypair as keypairs
from suikeys_core.errors import InvalidInputError
from suikeys_core.scheme import Scheme
from suikeys_core.utils import wipe

logger = logging.getLogger("suikeys.keystore")

KEYSTORE_VERSION = 1
KDF_NAME = "pbkdf2-hmac-sha256"
DEFAULT_ITERATIONS = 600_000
SALT_SIZE = 16
NONCE_SIZE = 12

_REQUIRED_FIELDS = ("scheme", "address", "ciphertext", "nonce", "tag", "salt")


def _derive_key(passphrase: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", passphrase.encode("utf-8"), salt, iterations)


def _iterations(raw) -> int:
    if isinstance(raw, bool):
        raise InvalidInputError(f"keystore: invalid iteration count {raw!r}")
    try:
        iterations = int(raw)
    except (TypeError, ValueError):
        raise InvalidInputError(f"keystore: invalid iteration count {raw!r}") from None
    if iterations < 1:
        raise InvalidInputError(f"keystore: invalid iteration count {raw!r}")
    return iterations


def _aes_gcm_encrypt(key: bytes, data: bytes) -> tuple[bytes, bytes, bytes]:
    """Encrypt *data* with AES-256-GCM. Returns (ciphertext, nonce, tag)."""
    nonce = os.urandom(NONCE_SIZE)
    cipher = AES.new(key, AES.MODE_GCM, nonce=nonce)
    ciphertext, tag = cipher.encrypt_and_digest(data)
    return ciphertext, nonce, tag


def _aes_gcm_decrypt(key: bytes, nonce: bytes, ciphertext: bytes, tag: bytes) -> bytes:
    cipher = AES.new(key, AES.MODE_GCM, nonce=nonce)
    return cipher.decrypt_and_verify(ciphertext, tag)


def export_encrypted(
    keypair: keypairs.Keypair, passphrase: str, iterations: int = DEFAULT_ITERATIONS,
) -> dict:
    """Encrypt *keypair*'s secret under *passphrase*."""
    if not passphrase:
        raise InvalidInputError("keystore: empty passphrase")
    if iterations < 1:
        raise InvalidInputError(f"keystore: invalid iteration count {iterations}")

    salt = os.urandom(SALT_SIZE)
    key = _derive_key(passphrase, salt, iterations)
    plain = bytearray([keypair.scheme.flag()])
    plain += keypair.export_secret()
    try:
        ciphertext, nonce, tag = _aes_gcm_encrypt(key, bytes(plain))
    finally:
        wipe(plain)

    return {
        "version": KEYSTORE_VERSION,
        "scheme": keypair.scheme.label(),
        "address": keypair.address,
        "public_key": keypair.public_key.hex(),
        "ciphertext": ciphertext.hex(),
        "nonce": nonce.hex(),
        "tag": tag.hex(),
        "salt": salt.hex(),
        "kdf": KDF_NAME,
        "kdf_iterations": iterations,
    }


def import_encrypted(data: dict, passphrase: str) -> keypairs.AnyKeypair:
    """Decrypt an export produced by ``export_encrypted``."""
    version = data.get("version", KEYSTORE_VERSION)
    if version != KEYSTORE_VERSION:
        raise InvalidInputError(f"keystore: unsupported version {version!r}")
    if data.get("kdf", KDF_NAME) != KDF_NAME:
        raise InvalidInputError(f"keystore: unsupported kdf {data.get('kdf')!r}")
    missing = [name for name in _REQUIRED_FIELDS if name not in data]
    if missing:
        raise InvalidInputError(f"keystore: missing fields {', '.join(missing)}")

    try:
        salt = bytes.fromhex(data["salt"])
        nonce = bytes.fromhex(data["nonce"])
        tag = bytes.fromhex(data["tag"])
        ciphertext = bytes.fromhex(data["ciphertext"])
    except (TypeError, ValueError):
        raise InvalidInputError("keystore: malformed hex field") from None

    if not isinstance(data["scheme"], str):
        raise InvalidInputError(f"keystore: scheme must be a string, got {data['scheme']!r}")
    scheme = Scheme.from_label(data["scheme"])
    iterations = _iterations(data.get("kdf_iterations", DEFAULT_ITERATIONS))
    key = _derive_key(passphrase, salt, iterations)
    try:
        plain = bytearray(_aes_gcm_decrypt(key, nonce, ciphertext, tag))
    except ValueError:
        logger.debug("keystore decryption failed for %s", data.get("address"))
        raise InvalidInputError("keystore: wrong passphrase or corrupted data") from None

    try:
        if len(plain) != keypairs.BECH32_PAYLOAD_SIZE or plain[0] != scheme.flag():
            raise InvalidInputError("keystore: decrypted payload does not match scheme")
        restored = keypairs.from_secret_key(scheme, bytes(plain[1:]))
    finally:
        wipe(plain)

    if not hmac.compare_digest(restored.address, str(data["address"]).lower()):
        raise InvalidInputError("keystore: address mismatch")
    return restored


def is_keystore(data) -> bool:
    """Cheap shape check used before attempting a decrypt."""
    if not isinstance(data, dict):
        return False
    return all(name in data for name in _REQUIRED_FIELDS) and \
        data.get("kdf", KDF_NAME) == KDF_NAME
