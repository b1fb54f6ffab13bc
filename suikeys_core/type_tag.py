"""
Move type tags.

Text form::

    bool | u8 | u16 | u32 | u64 | u128 | u256 | address | signer
    vector<T>
    <address>::<module>::<name>[<T1, T2, ...>]

Struct addresses may be given in short form (``0x2``) and are normalised
to the full 32-byte form, so ``parse_type_tag(str(tag)) == tag``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from suikeys_core.bcs import serialize_str, uleb128
from suikeys_core.errors import InvalidInputError
from suikeys_core.utils import parse_address

# BCS variant order of the TypeTag enum on the wire.
_VARIANTS = {
    "bool": 0,
    "u8": 1,
    "u64": 2,
    "u128": 3,
    "address": 4,
    "signer": 5,
    "vector": 6,
    "struct": 7,
    "u16": 8,
    "u32": 9,
    "u256": 10,
}

PRIMITIVES = ("bool", "u8", "u16", "u32", "u64", "u128", "u256", "address", "signer")


@dataclass(frozen=True)
class StructTag:
    address: bytes
    module: str
    name: str
    type_params: tuple[TypeTag, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        base = f"0x{self.address.hex()}::{self.module}::{self.name}"
        if not self.type_params:
            return base
        return f"{base}<{', '.join(str(p) for p in self.type_params)}>"

    def to_bcs(self) -> bytes:
        out = bytearray(self.address)
        out += serialize_str(self.module)
        out += serialize_str(self.name)
        out += uleb128(len(self.type_params))
        for param in self.type_params:
            out += param.to_bcs()
        return bytes(out)


@dataclass(frozen=True)
class TypeTag:
    kind: str
    vector: TypeTag | None = None
    struct: StructTag | None = None

    @classmethod
    def primitive(cls, name: str) -> TypeTag:
        if name not in PRIMITIVES:
            raise InvalidInputError(f"type tag: unknown primitive {name!r}")
        return cls(name)

    @classmethod
    def vector_of(cls, inner: TypeTag) -> TypeTag:
        return cls("vector", vector=inner)

    @classmethod
    def struct_of(cls, tag: StructTag) -> TypeTag:
        return cls("struct", struct=tag)

    def __str__(self) -> str:
        if self.kind == "vector":
            return f"vector<{self.vector}>"
        if self.kind == "struct":
            return str(self.struct)
        return self.kind

    def to_bcs(self) -> bytes:
        out = uleb128(_VARIANTS[self.kind])
        if self.kind == "vector":
            return out + self.vector.to_bcs()
        if self.kind == "struct":
            return out + self.struct.to_bcs()
        return out


def parse_type_tag(text: str) -> TypeTag:
    trimmed = text.strip()
    if trimmed in PRIMITIVES:
        return TypeTag.primitive(trimmed)

    if trimmed.startswith("vector<") and trimmed.endswith(">"):
        return TypeTag.vector_of(parse_type_tag(trimmed[len("vector<"):-1]))

    parts = trimmed.split("::", 2)
    if len(parts) != 3 or not all(parts):
        raise InvalidInputError(f"type tag: invalid type tag {text!r}")
    address, module, name_part = parts

    name, args, has_args = _split_struct_type(name_part)
    type_params: tuple[TypeTag, ...] = ()
    if has_args:
        type_params = tuple(parse_type_tag(p) for p in _split_generic_params(args))

    return TypeTag.struct_of(StructTag(parse_address(address), module, name, type_params))


def parse_struct_tag(text: str) -> StructTag:
    tag = parse_type_tag(text)
    if tag.struct is None:
        raise InvalidInputError(f"type tag: {text!r} is not a struct")
    return tag.struct


def _split_struct_type(text: str) -> tuple[str, str, bool]:
    open_idx = text.find("<")
    if open_idx == -1:
        return text, "", False
    if not text.endswith(">") or open_idx == 0:
        raise InvalidInputError(f"type tag: invalid struct type {text!r}")
    return text[:open_idx], text[open_idx + 1:-1], True


def _split_generic_params(text: str) -> list[str]:
    """Split top-level comma-separated type parameters."""
    parts = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch == "<":
            depth += 1
        elif ch == ">":
            if depth == 0:
                raise InvalidInputError(f"type tag: invalid type parameters {text!r}")
            depth -= 1
        elif ch == "," and depth == 0:
            part = text[start:i].strip()
            if not part:
                raise InvalidInputError(f"type tag: invalid type parameters {text!r}")
            parts.append(part)
            start = i + 1
    if depth != 0:
        raise InvalidInputError(f"type tag: invalid type parameters {text!r}")
    last = text[start:].strip()
    if not last:
        raise InvalidInputError(f"type tag: invalid type parameters {text!r}")
    parts.append(last)
    return parts
