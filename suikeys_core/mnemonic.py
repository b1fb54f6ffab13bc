"""
BIP-39 mnemonic support.

Phrases are 12-24 English words (128-256 bits of entropy in 32-bit
steps).  The seed is the 64-byte PBKDF2-HMAC-SHA512 expansion of the
phrase salted with ``"mnemonic" + passphrase``.
"""

from __future__ import annotations

import os

from mnemonic import Mnemonic

from suikeys_core.errors import MnemonicError

VALID_STRENGTHS = (128, 160, 192, 224, 256)
SEED_SIZE = 64

_MNEMO = Mnemonic("english")


def _generate_entropy(strength: int = 128) -> bytes:
    if strength not in VALID_STRENGTHS:
        raise MnemonicError("mnemonic: entropy must be 128-256 bits in 32-bit steps")
    return os.urandom(strength // 8)


def entropy_to_mnemonic(entropy: bytes) -> str:
    """Encode raw entropy (16/20/24/28/32 bytes) as a phrase."""
    if len(entropy) * 8 not in VALID_STRENGTHS:
        raise MnemonicError(f"mnemonic: invalid entropy length {len(entropy)}")
    return _MNEMO.to_mnemonic(entropy)


def generate_mnemonic(strength: int = 128) -> str:
    """Generate a new random phrase with *strength* bits of entropy."""
    return entropy_to_mnemonic(_generate_entropy(strength))


def validate_mnemonic(phrase: str) -> bool:
    """True when the phrase has a valid length, words and checksum."""
    words = phrase.strip().split()
    if len(words) not in (12, 15, 18, 21, 24):
        return False
    return _MNEMO.check(" ".join(words))


def mnemonic_to_seed(phrase: str, passphrase: str = "") -> bytes:
    """Expand a validated phrase into the 64-byte BIP-39 seed."""
    if not validate_mnemonic(phrase):
        raise MnemonicError("mnemonic: invalid phrase")
    seed = Mnemonic.to_seed(" ".join(phrase.strip().split()), passphrase)
    if len(seed) != SEED_SIZE:
        raise MnemonicError(f"mnemonic: unexpected seed length {len(seed)}")
    return seed
