"""
Shared pytest fixtures for the suikeys test suite.
"""

import pytest

from suikeys_core import keypair
from suikeys_core.scheme import Scheme

ABANDON_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)
ED25519_MNEMONIC = "ship host undo vacant also squeeze current alarm shift blush travel supply"
SECP256K1_MNEMONIC = "decline core depend top judge surprise paper vacant caution smoke gospel year"
SECP256R1_MNEMONIC = "neutral cargo public impulse smile lock duck ignore car such remain pattern"


@pytest.fixture
def abandon_mnemonic():
    return ABANDON_MNEMONIC


@pytest.fixture
def ed25519_keypair():
    """Deterministic Ed25519 keypair (keytool vector)."""
    return keypair.derive_from_mnemonic(Scheme.ED25519, ED25519_MNEMONIC)


@pytest.fixture
def secp256k1_keypair():
    """Deterministic secp256k1 keypair (keytool vector)."""
    return keypair.derive_from_mnemonic(Scheme.SECP256K1, SECP256K1_MNEMONIC)


@pytest.fixture
def secp256r1_keypair():
    """Deterministic secp256r1 keypair (keytool vector)."""
    return keypair.derive_from_mnemonic(Scheme.SECP256R1, SECP256R1_MNEMONIC)


@pytest.fixture(params=[Scheme.ED25519, Scheme.SECP256K1, Scheme.SECP256R1], ids=lambda s: s.label())
def any_keypair(request):
    """A freshly generated keypair for each scheme."""
    return keypair.generate(request.param)
