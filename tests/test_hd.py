"""
Tests for suikeys_core.hd - BIP-32 and SLIP-0010 derivation cores.

Known-answer vectors are BIP-32 test vector 1 and SLIP-0010 test vector 1
for ed25519 (seed 000102...0f).
"""

import unittest
from unittest.mock import patch

from suikeys_core import hd, secp256k1
from suikeys_core.derivation_path import PathSegment, parse
from suikeys_core.errors import KeyRangeError, PathError
from suikeys_core.hd import (
    bip32_derive_path,
    bip32_master_key,
    derive_child_private_key,
    slip10_derive_child,
    slip10_derive_path,
    slip10_master_key,
)

SEED = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
K1_ORDER = secp256k1.ORDER


# ═══════════════════════════════════════════════════════════════════
#  BIP-32
# ═══════════════════════════════════════════════════════════════════

class TestBIP32(unittest.TestCase):

    def test_master_vector(self):
        key, chain = bip32_master_key(SEED)
        self.assertEqual(key.hex(), "e8f32e723decf4051aefac8e2c93c9c5b214313817cdb01a1494b917c8436b35")
        self.assertEqual(chain.hex(), "873dff81c02f525623fd1fe5167eac3a55a049de3d314bb42ee227ffed37d508")

    def test_hardened_child_vector(self):
        key, chain = bip32_derive_path(
            SEED, [PathSegment(0, True)], secp256k1.compressed_public_key, K1_ORDER,
        )
        self.assertEqual(key.hex(), "edb2e14f9ee77d26dd93b4ecede8d16ed408ce149b6cd80b0715a2d911a0afea")
        self.assertEqual(chain.hex(), "47fdacbd0f1097043b78c63c20c34ef4ed9a111d980047ad16282c7ae6236141")

    def test_normal_child_vector(self):
        key, chain = bip32_derive_path(
            SEED, parse("m/0'/1").segments, secp256k1.compressed_public_key, K1_ORDER,
        )
        self.assertEqual(key.hex(), "3c6cb8d0f6a264c91ea8b5030fadaa8e538b020f0a387421a12de9319dc93368")
        self.assertEqual(chain.hex(), "2a7857631386ba23dacac34180dd1983734e444fdbf774041578e9b6adb37c19")

    def test_normal_step_uses_pubkey_hook(self):
        calls = []

        def hook(key):
            calls.append(key)
            return secp256k1.compressed_public_key(key)

        bip32_derive_path(SEED, parse("m/0'/1/2").segments, hook, K1_ORDER)
        self.assertEqual(len(calls), 2)

    def test_hardened_step_skips_pubkey_hook(self):
        def hook(key):
            raise AssertionError("hook must not be called for hardened steps")

        bip32_derive_path(SEED, parse("m/0'/1'").segments, hook, K1_ORDER)

    def test_il_above_order_rejected(self):
        key, chain = bip32_master_key(SEED)
        with patch.object(hd, "hmac_sha512", return_value=b"\xff" * 64):
            with self.assertRaisesRegex(KeyRangeError, "IL >= curve order"):
                derive_child_private_key(
                    key, chain, PathSegment(0, True), secp256k1.compressed_public_key, K1_ORDER,
                )

    def test_zero_child_rejected(self):
        parent = (K1_ORDER - 5).to_bytes(32, "big")
        il = (5).to_bytes(32, "big")
        with patch.object(hd, "hmac_sha512", return_value=il + b"\x00" * 32):
            with self.assertRaisesRegex(KeyRangeError, "zero key"):
                derive_child_private_key(
                    parent, b"\x00" * 32, PathSegment(0, True),
                    secp256k1.compressed_public_key, K1_ORDER,
                )

    def test_child_is_32_bytes(self):
        key, chain = bip32_derive_path(
            SEED, parse("m/54'/784'/0'/0/0").segments, secp256k1.compressed_public_key, K1_ORDER,
        )
        self.assertEqual(len(key), 32)
        self.assertEqual(len(chain), 32)


# ═══════════════════════════════════════════════════════════════════
#  SLIP-0010
# ═══════════════════════════════════════════════════════════════════

class TestSLIP10(unittest.TestCase):

    def test_master_vector(self):
        key, chain = slip10_master_key(SEED)
        self.assertEqual(key.hex(), "2b4be7f19ee27bbf30c667b642d5f4aa69fd169872f8fc3059c08ebae2eb19e7")
        self.assertEqual(chain.hex(), "90046a93de5380a72b5e45010748567d5ea02bbf6522f979e05c0d8d8ca9fffb")

    def test_hardened_child_vector(self):
        key, chain = slip10_derive_path(SEED, [PathSegment(0, True)])
        self.assertEqual(key.hex(), "68e0fe46dfb67e368c75379acec591dad19df3cde26e63b93a8e704f1dade7a3")
        self.assertEqual(chain.hex(), "8b59aa11380b624e81507a27fedda59fea6d0b779a778918a2fd3590e16e9c69")

    def test_rejects_normal_segment(self):
        key, chain = slip10_master_key(SEED)
        with self.assertRaisesRegex(PathError, "hardened"):
            slip10_derive_child(key, chain, PathSegment(1, False))

    def test_path_rejects_normal_segment(self):
        with self.assertRaises(PathError):
            slip10_derive_path(SEED, parse("m/44'/784'/0'/0/0").segments)

    def test_distinct_indices(self):
        a, _ = slip10_derive_path(SEED, parse("m/44'/784'/0'/0'/0'").segments)
        b, _ = slip10_derive_path(SEED, parse("m/44'/784'/0'/0'/1'").segments)
        self.assertNotEqual(a, b)


if __name__ == "__main__":
    unittest.main()
