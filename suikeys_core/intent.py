"""
Intent signing.

Every signature on the chain covers an *intent message*: a three-byte
domain separator ``(scope, version, app_id)`` followed by the BCS bytes of
the payload.  The signed digest is ``blake2b-256`` of that composite, so a
signature made for one scope can never be replayed under another.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Any

from suikeys_core import bcs
from suikeys_core.errors import IntentError

INTENT_LENGTH = 3
DIGEST_SIZE = 32


class IntentScope(IntEnum):
    TRANSACTION_DATA = 0
    TRANSACTION_EFFECTS = 1
    CHECKPOINT_SUMMARY = 2
    PERSONAL_MESSAGE = 3
    SENDER_SIGNED_TRANSACTION = 4
    PROOF_OF_POSSESSION = 5


class IntentVersion(IntEnum):
    V0 = 0


class AppId(IntEnum):
    SUI = 0


@dataclass(frozen=True)
class Intent:
    scope: int = IntentScope.TRANSACTION_DATA
    version: int = IntentVersion.V0
    app_id: int = AppId.SUI

    @classmethod
    def default(cls) -> Intent:
        return cls()

    def with_scope(self, scope: int) -> Intent:
        return replace(self, scope=scope)

    def with_app_id(self, app_id: int) -> Intent:
        return replace(self, app_id=app_id)

    def validate(self) -> None:
        if self.scope not in IntentScope._value2member_map_:
            raise IntentError("intent: invalid scope byte")
        if self.version != IntentVersion.V0:
            raise IntentError("intent: invalid version byte")
        if self.app_id != AppId.SUI:
            raise IntentError("intent: invalid app id byte")

    def to_bytes(self) -> bytes:
        return bytes([self.scope & 0xFF, self.version & 0xFF, self.app_id & 0xFF])

    def __bytes__(self) -> bytes:
        return self.to_bytes()


def default_intent_with(scope: int) -> Intent:
    return Intent.default().with_scope(scope)


def intent_from_bytes(raw: bytes) -> Intent:
    if len(raw) != INTENT_LENGTH:
        raise IntentError("intent: invalid serialized intent length")
    intent = Intent(scope=raw[0], version=raw[1], app_id=raw[2])
    intent.validate()
    return intent


def parse_intent(hex_encoded: str) -> Intent:
    try:
        raw = bytes.fromhex(hex_encoded)
    except ValueError as exc:
        raise IntentError(f"intent: decode hex: {exc}") from exc
    return intent_from_bytes(raw)


@dataclass(frozen=True)
class IntentMessage:
    """An intent paired with a BCS-serializable value."""
    intent: Intent
    value: Any

    def to_bcs(self) -> bytes:
        self.intent.validate()
        try:
            value_bytes = bcs.serialize(self.value)
        except (TypeError, ValueError) as exc:
            raise IntentError(f"intent: marshal value: {exc}") from exc
        return self.intent.to_bytes() + value_bytes


def hash_intent_message(message: IntentMessage) -> bytes:
    """``blake2b-256(intent || bcs(value))``."""
    return hashlib.blake2b(message.to_bcs(), digest_size=DIGEST_SIZE).digest()


def hash_intent_bytes(scope: int, payload: bytes) -> bytes:
    """Hash already-serialized *payload* under the default intent for *scope*."""
    intent = default_intent_with(scope)
    intent.validate()
    return hashlib.blake2b(intent.to_bytes() + bytes(payload), digest_size=DIGEST_SIZE).digest()
