"""
Tests for suikeys_core.signing - intent-scoped signers and envelope
assembly, independent of any curve.
"""

import hashlib
import unittest

from suikeys_core.errors import InvalidInputError
from suikeys_core.scheme import Scheme
from suikeys_core.signing import (
    personal_message_digest,
    serialize_signature,
    sign_personal_message,
    sign_transaction,
    verify_personal_message,
)


def blake2b256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


class TestDigests(unittest.TestCase):

    def test_personal_message_digest(self):
        self.assertEqual(
            personal_message_digest(b"hello world"),
            blake2b256(b"\x03\x00\x00\x0bhello world"),
        )

    def test_empty_message_rejected(self):
        with self.assertRaisesRegex(InvalidInputError, "empty message"):
            personal_message_digest(b"")

    def test_str_message_rejected(self):
        with self.assertRaisesRegex(InvalidInputError, "expected bytes, got str"):
            personal_message_digest("hello")

    def test_bytearray_message_accepted(self):
        self.assertEqual(
            personal_message_digest(bytearray(b"hello")),
            personal_message_digest(b"hello"),
        )


class TestSigners(unittest.TestCase):

    def setUp(self):
        self.seen = []

    def _sign(self, digest):
        self.seen.append(digest)
        return b"\xab" * 64

    def test_personal_message_envelope(self):
        pub = b"\x02" * 33
        sig = sign_personal_message(Scheme.SECP256K1, b"hi", pub, self._sign)
        self.assertEqual(sig[0], 0x01)
        self.assertEqual(sig[1:65], b"\xab" * 64)
        self.assertEqual(sig[65:], pub)
        self.assertEqual(self.seen, [personal_message_digest(b"hi")])

    def test_transaction_digest(self):
        sign_transaction(Scheme.ED25519, b"txbytes", b"\x01" * 32, self._sign)
        self.assertEqual(self.seen, [blake2b256(b"\x00\x00\x00txbytes")])

    def test_empty_message_prefixed_with_scheme(self):
        with self.assertRaisesRegex(InvalidInputError, "^secp256r1: "):
            sign_personal_message(Scheme.SECP256R1, b"", b"\x02" * 33, self._sign)
        self.assertEqual(self.seen, [])

    def test_str_message_prefixed_with_scheme(self):
        with self.assertRaisesRegex(InvalidInputError, "^ed25519: personal message: expected bytes"):
            sign_personal_message(Scheme.ED25519, "hello", b"\x01" * 32, self._sign)
        self.assertEqual(self.seen, [])

    def test_bad_signature_length(self):
        with self.assertRaises(InvalidInputError):
            serialize_signature(Scheme.ED25519, b"\x00" * 63, b"\x00" * 32)

    def test_verify_delegates(self):
        calls = []
        verify_personal_message(
            Scheme.ED25519, b"hi", b"sig", lambda d, s: calls.append((d, s)),
        )
        self.assertEqual(calls, [(personal_message_digest(b"hi"), b"sig")])

    def test_verify_empty_message(self):
        with self.assertRaisesRegex(InvalidInputError, "^ed25519: "):
            verify_personal_message(Scheme.ED25519, b"", b"sig", lambda d, s: None)


if __name__ == "__main__":
    unittest.main()
