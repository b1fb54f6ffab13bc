"""
Tests for suikeys_core.intent - intent prefix, envelope and digests.
"""

import hashlib
import unittest

from suikeys_core.bcs import PersonalMessage
from suikeys_core.errors import IntentError
from suikeys_core.intent import (
    AppId,
    Intent,
    IntentMessage,
    IntentScope,
    IntentVersion,
    default_intent_with,
    hash_intent_bytes,
    hash_intent_message,
    intent_from_bytes,
    parse_intent,
)


def blake2b256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


# ═══════════════════════════════════════════════════════════════════
#  Intent value
# ═══════════════════════════════════════════════════════════════════

class TestIntent(unittest.TestCase):

    def test_default(self):
        intent = Intent.default()
        self.assertEqual(intent.scope, IntentScope.TRANSACTION_DATA)
        self.assertEqual(intent.version, IntentVersion.V0)
        self.assertEqual(intent.app_id, AppId.SUI)
        self.assertEqual(bytes(intent), b"\x00\x00\x00")

    def test_personal_message_prefix(self):
        self.assertEqual(default_intent_with(IntentScope.PERSONAL_MESSAGE).to_bytes(), b"\x03\x00\x00")

    def test_with_scope_is_new_value(self):
        base = Intent.default()
        changed = base.with_scope(IntentScope.PROOF_OF_POSSESSION)
        self.assertEqual(base.scope, 0)
        self.assertEqual(changed.scope, 5)

    def test_validate_scopes(self):
        for scope in IntentScope:
            default_intent_with(scope).validate()

    def test_invalid_scope(self):
        with self.assertRaisesRegex(IntentError, "scope"):
            Intent(scope=6).validate()

    def test_invalid_version(self):
        with self.assertRaisesRegex(IntentError, "version"):
            Intent(version=1).validate()

    def test_invalid_app_id(self):
        with self.assertRaisesRegex(IntentError, "app id"):
            Intent.default().with_app_id(2).validate()

    def test_from_bytes(self):
        self.assertEqual(intent_from_bytes(b"\x03\x00\x00"), default_intent_with(3))

    def test_from_bytes_wrong_length(self):
        with self.assertRaisesRegex(IntentError, "length"):
            intent_from_bytes(b"\x00\x00")

    def test_parse_hex(self):
        self.assertEqual(parse_intent("040000").scope, IntentScope.SENDER_SIGNED_TRANSACTION)

    def test_parse_bad_hex(self):
        with self.assertRaises(IntentError):
            parse_intent("zz0000")

    def test_parse_invalid_scope(self):
        with self.assertRaises(IntentError):
            parse_intent("ff0000")


# ═══════════════════════════════════════════════════════════════════
#  Digests
# ═══════════════════════════════════════════════════════════════════

class TestIntentDigest(unittest.TestCase):

    def test_personal_message_hello(self):
        payload = PersonalMessage(b"Hello").to_bcs()
        self.assertEqual(
            hash_intent_bytes(IntentScope.PERSONAL_MESSAGE, payload),
            blake2b256(b"\x03\x00\x00" + payload),
        )

    def test_message_and_bytes_agree(self):
        msg = IntentMessage(default_intent_with(IntentScope.PERSONAL_MESSAGE), PersonalMessage(b"Hello"))
        self.assertEqual(msg.to_bcs(), b"\x03\x00\x00\x05Hello")
        self.assertEqual(
            hash_intent_message(msg),
            hash_intent_bytes(IntentScope.PERSONAL_MESSAGE, b"\x05Hello"),
        )

    def test_domain_separation(self):
        for data in (b"", b"\x00", b"transaction bytes"):
            with self.subTest(data=data):
                tx = hash_intent_bytes(IntentScope.TRANSACTION_DATA, data)
                pm = hash_intent_bytes(IntentScope.PERSONAL_MESSAGE, data)
                self.assertNotEqual(tx, pm)
                self.assertNotEqual(tx, blake2b256(data))
                self.assertNotEqual(pm, blake2b256(data))

    def test_digest_size(self):
        self.assertEqual(len(hash_intent_bytes(IntentScope.TRANSACTION_DATA, b"x")), 32)

    def test_invalid_intent_not_hashed(self):
        with self.assertRaises(IntentError):
            hash_intent_message(IntentMessage(Intent(version=9), b"x"))

    def test_unserializable_value(self):
        with self.assertRaisesRegex(IntentError, "marshal"):
            hash_intent_message(IntentMessage(Intent.default(), object()))


if __name__ == "__main__":
    unittest.main()
