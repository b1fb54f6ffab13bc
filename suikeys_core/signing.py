"""
Intent-scoped signers shared by every keypair type.

Both signers hash the payload under the right intent, hand the 32-byte
digest to a scheme-specific ``sign_fn`` and assemble the serialized
signature ``flag || sig(64) || public_key``.
"""

from __future__ import annotations

from typing import Callable

from suikeys_core.bcs import PersonalMessage
from suikeys_core.errors import InvalidInputError
from suikeys_core.intent import (
    IntentMessage,
    IntentScope,
    default_intent_with,
    hash_intent_bytes,
    hash_intent_message,
)
from suikeys_core.scheme import Scheme

SIGNATURE_SIZE = 64


def personal_message_digest(message: bytes) -> bytes:
    if not isinstance(message, (bytes, bytearray, memoryview)):
        raise InvalidInputError(
            f"personal message: expected bytes, got {type(message).__name__}"
        )
    if not message:
        raise InvalidInputError("personal message: empty message")
    intent_msg = IntentMessage(
        default_intent_with(IntentScope.PERSONAL_MESSAGE),
        PersonalMessage(bytes(message)),
    )
    return hash_intent_message(intent_msg)


def serialize_signature(scheme: Scheme, signature: bytes, public_key: bytes) -> bytes:
    if len(signature) != SIGNATURE_SIZE:
        raise InvalidInputError(
            f"{scheme.label()}: unexpected signature length {len(signature)}"
        )
    return bytes([scheme.flag()]) + bytes(signature) + bytes(public_key)


def sign_personal_message(
    scheme: Scheme,
    message: bytes,
    public_key: bytes,
    sign_fn: Callable[[bytes], bytes],
) -> bytes:
    try:
        digest = personal_message_digest(message)
    except InvalidInputError as exc:
        raise InvalidInputError(f"{scheme.label()}: {exc}") from exc
    return serialize_signature(scheme, sign_fn(digest), public_key)


def sign_transaction(
    scheme: Scheme,
    tx_bytes: bytes,
    public_key: bytes,
    sign_fn: Callable[[bytes], bytes],
) -> bytes:
    digest = hash_intent_bytes(IntentScope.TRANSACTION_DATA, tx_bytes)
    return serialize_signature(scheme, sign_fn(digest), public_key)


def verify_personal_message(
    scheme: Scheme,
    message: bytes,
    signature: bytes,
    verify_fn: Callable[[bytes, bytes], None],
) -> None:
    """Recompute the intent digest and delegate to ``verify_fn(digest, signature)``."""
    try:
        digest = personal_message_digest(message)
    except InvalidInputError as exc:
        raise InvalidInputError(f"{scheme.label()}: {exc}") from exc
    verify_fn(digest, signature)
