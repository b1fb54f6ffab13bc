"""
Tests for suikeys_core.scheme - scheme flags and address derivation.

Covers:
  - flag / purpose / label per scheme
  - from_flag / from_label lookups and their failures
  - address_from_public_key shape and known vectors
  - address_flag for unknown schemes
"""

import hashlib
import unittest

from suikeys_core.errors import InvalidInputError, UnsupportedSchemeError
from suikeys_core.scheme import (
    FLAG_UNSPECIFIED,
    Scheme,
    address_flag,
    address_from_public_key,
)

# ═══════════════════════════════════════════════════════════════════
#  Scheme attributes
# ═══════════════════════════════════════════════════════════════════

class TestSchemeAttributes(unittest.TestCase):

    def test_flags(self):
        self.assertEqual(Scheme.ED25519.flag(), 0x00)
        self.assertEqual(Scheme.SECP256K1.flag(), 0x01)
        self.assertEqual(Scheme.SECP256R1.flag(), 0x02)

    def test_purposes(self):
        self.assertEqual(Scheme.ED25519.purpose(), 44)
        self.assertEqual(Scheme.SECP256K1.purpose(), 54)
        self.assertEqual(Scheme.SECP256R1.purpose(), 74)

    def test_labels(self):
        self.assertEqual(Scheme.ED25519.label(), "ed25519")
        self.assertEqual(Scheme.SECP256K1.label(), "secp256k1")
        self.assertEqual(Scheme.SECP256R1.label(), "secp256r1")

    def test_from_flag(self):
        for scheme in Scheme:
            self.assertIs(Scheme.from_flag(scheme.flag()), scheme)

    def test_from_flag_unknown(self):
        with self.assertRaises(UnsupportedSchemeError) as ctx:
            Scheme.from_flag(0x05)
        self.assertIn("0x05", str(ctx.exception))

    def test_from_label_case_insensitive(self):
        self.assertIs(Scheme.from_label(" Secp256R1 "), Scheme.SECP256R1)

    def test_from_label_unknown(self):
        with self.assertRaises(UnsupportedSchemeError):
            Scheme.from_label("bls12381")

    def test_unsupported_scheme_is_input_error(self):
        self.assertTrue(issubclass(UnsupportedSchemeError, InvalidInputError))
        self.assertTrue(issubclass(UnsupportedSchemeError, ValueError))


# ═══════════════════════════════════════════════════════════════════
#  Addresses
# ═══════════════════════════════════════════════════════════════════

class TestAddress(unittest.TestCase):

    ED_PUB = bytes.fromhex("900b4d81eecea3df2f74b14200c4f4cf3f49afaca7a634ffd2cf6ff82bdaecf2")
    K1_PUB = bytes.fromhex("02623d860f46cce9117d3f1ac382b79c59928a004a1986561a99df2a85167cf585")
    R1_PUB = bytes.fromhex("034019bca8a878458a63e5bf53f30855e31070f7b57cf9dcf265c98bdb17bb17c4")

    def test_ed25519_vector(self):
        self.assertEqual(
            address_from_public_key(Scheme.ED25519, self.ED_PUB),
            "0x5e93a736d04fbb25737aa40bee40171ef79f65fae833749e3c089fe7cc2161f1",
        )

    def test_secp256k1_vector(self):
        self.assertEqual(
            address_from_public_key(Scheme.SECP256K1, self.K1_PUB),
            "0xc61a7f1161020a717f852dca2e9bfc1ffe235145406dfbdccc16e6907c1f5403",
        )

    def test_secp256r1_vector(self):
        self.assertEqual(
            address_from_public_key(Scheme.SECP256R1, self.R1_PUB),
            "0x0c0f9f53f2ad697e18279dfadefdd070c8e99416309d3ce614086c0860db6bb4",
        )

    def test_address_shape(self):
        for scheme in Scheme:
            addr = address_from_public_key(scheme, b"\x07" * 33)
            self.assertEqual(len(addr), 66)
            self.assertTrue(addr.startswith("0x"))
            self.assertEqual(addr, addr.lower())

    def test_matches_blake2b_of_flag_and_key(self):
        expected = hashlib.blake2b(b"\x01" + self.K1_PUB, digest_size=32).hexdigest()
        self.assertEqual(address_from_public_key(Scheme.SECP256K1, self.K1_PUB), "0x" + expected)

    def test_same_key_different_scheme_differs(self):
        key = b"\x02" * 33
        self.assertNotEqual(
            address_from_public_key(Scheme.SECP256K1, key),
            address_from_public_key(Scheme.SECP256R1, key),
        )

    def test_empty_public_key(self):
        with self.assertRaises(InvalidInputError):
            address_from_public_key(Scheme.ED25519, b"")

    def test_unknown_scheme(self):
        with self.assertRaises(UnsupportedSchemeError):
            address_from_public_key(9, b"\x01" * 32)

    def test_address_flag_unknown(self):
        self.assertEqual(address_flag(42), FLAG_UNSPECIFIED)
        self.assertEqual(address_flag(Scheme.SECP256R1), 2)
        self.assertEqual(address_flag(1), 1)


if __name__ == "__main__":
    unittest.main()
