"""
BIP-32 derivation paths.

Textual form ``m/44'/784'/0'/0'/0'``; a trailing ``'`` marks a hardened
segment.  ``validate_for_scheme`` applies the chain's structural rules:

  - at least five segments
  - purpose (hardened) matches the scheme, coin type is 784 (hardened)
  - account is hardened
  - Ed25519: change and address hardened
  - Secp256k1 / Secp256r1: change and address NOT hardened
"""

from __future__ import annotations

from dataclasses import dataclass

from suikeys_core.errors import PathError
from suikeys_core.scheme import Scheme

HARDENED = 0x80000000
COIN_TYPE = 784


@dataclass(frozen=True)
class PathSegment:
    index: int
    hardened: bool = False

    def __post_init__(self):
        if not 0 <= self.index < HARDENED:
            raise PathError(f"path: segment index {self.index} out of range")

    @property
    def hardened_index(self) -> int:
        """Wire index: ``index | 0x80000000`` when hardened."""
        if self.hardened:
            return self.index | HARDENED
        return self.index

    def __str__(self) -> str:
        return f"{self.index}'" if self.hardened else str(self.index)


class DerivationPath:
    """An immutable ordered sequence of path segments."""

    __slots__ = ("_segments",)

    def __init__(self, segments=()):
        self._segments = tuple(segments)

    @property
    def segments(self) -> tuple[PathSegment, ...]:
        return self._segments

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self):
        return iter(self._segments)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DerivationPath):
            return NotImplemented
        return self._segments == other._segments

    def __hash__(self) -> int:
        return hash(self._segments)

    def __str__(self) -> str:
        if not self._segments:
            return "m"
        return "m/" + "/".join(str(seg) for seg in self._segments)

    def __repr__(self) -> str:
        return f"DerivationPath({str(self)!r})"

    @property
    def is_fully_hardened(self) -> bool:
        return all(seg.hardened for seg in self._segments)

    @classmethod
    def parse(cls, raw: str) -> DerivationPath:
        """Parse ``"m"`` or ``"m/<n>[']/..."`` into a path."""
        raw = raw.strip()
        if not raw:
            raise PathError("path: empty path")
        if raw == "m":
            return cls()
        if not raw.startswith("m/"):
            raise PathError("path: must start with m/")

        segments = []
        for position, part in enumerate(raw[2:].split("/")):
            if not part:
                raise PathError(f"path: empty segment at position {position}")
            hardened = part.endswith("'")
            digits = part[:-1] if hardened else part
            if not digits.isdigit() or not digits.isascii():
                raise PathError(f"path: invalid segment {part!r}")
            index = int(digits)
            if index >= HARDENED:
                raise PathError(f"path: invalid segment {part!r}: index out of range")
            segments.append(PathSegment(index, hardened))
        return cls(segments)

    def validate_for_scheme(self, scheme: Scheme) -> None:
        """Raise ``PathError`` unless the path is usable for *scheme*."""
        if not isinstance(scheme, Scheme):
            raise PathError(f"path: unsupported scheme {scheme!r}")
        if len(self._segments) < 5:
            raise PathError(f"path: expected at least 5 segments, got {len(self._segments)}")

        purpose, coin, account, change, address = self._segments[:5]
        if not purpose.hardened or purpose.index != scheme.purpose():
            raise PathError(
                f"path: invalid purpose segment {purpose} for scheme {scheme.label()}"
            )
        if not coin.hardened or coin.index != COIN_TYPE:
            raise PathError(f"path: invalid coin type {coin}")
        if not account.hardened:
            raise PathError("path: account segment must be hardened")

        if scheme is Scheme.ED25519:
            if not change.hardened or not address.hardened:
                raise PathError("path: ed25519 requires hardened change and address")
        elif change.hardened or address.hardened:
            raise PathError("path: ecdsa schemes require non-hardened change and address")


def parse(raw: str) -> DerivationPath:
    return DerivationPath.parse(raw)


def default_derivation_path(
    scheme: Scheme, account: int = 0, change: int = 0, address_index: int = 0,
) -> DerivationPath:
    """Recommended path for *scheme*, e.g. ``m/54'/784'/0'/0/0`` for secp256k1."""
    tail_hardened = scheme is Scheme.ED25519
    return DerivationPath([
        PathSegment(scheme.purpose(), True),
        PathSegment(COIN_TYPE, True),
        PathSegment(account, True),
        PathSegment(change, tail_hardened),
        PathSegment(address_index, tail_hardened),
    ])
