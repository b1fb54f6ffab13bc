"""
Minimal BCS (Binary Canonical Serialization) encoder.

Only what the signing core needs: ULEB128 lengths, byte vectors, strings,
little-endian u64 and the ``PersonalMessage`` struct.  Values that know
their own encoding expose ``to_bcs()``.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any


def uleb128(value: int) -> bytes:
    if value < 0:
        raise ValueError("bcs: uleb128 value must be non-negative")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def serialize_bytes(data: bytes) -> bytes:
    """``vector<u8>``: ULEB128 length followed by the raw bytes."""
    return uleb128(len(data)) + bytes(data)


def serialize_str(text: str) -> bytes:
    return serialize_bytes(text.encode("utf-8"))


def serialize_u64(value: int) -> bytes:
    return struct.pack("<Q", value)


def serialize(value: Any) -> bytes:
    """Serialize *value*; objects with ``to_bcs()`` encode themselves."""
    if hasattr(value, "to_bcs"):
        return value.to_bcs()
    if isinstance(value, bool):
        return b"\x01" if value else b"\x00"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return serialize_bytes(bytes(value))
    if isinstance(value, str):
        return serialize_str(value)
    if isinstance(value, int):
        return serialize_u64(value)
    if isinstance(value, (list, tuple)):
        return uleb128(len(value)) + b"".join(serialize(v) for v in value)
    raise TypeError(f"bcs: cannot serialize {type(value).__name__}")


@dataclass(frozen=True)
class PersonalMessage:
    """Arbitrary bytes signed under the PersonalMessage intent scope."""
    message: bytes

    def to_bcs(self) -> bytes:
        return serialize_bytes(self.message)
