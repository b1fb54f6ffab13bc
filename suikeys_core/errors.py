"""
Exception hierarchy for suikeys.

Every error raised by the core derives from ``KeychainError``, which is a
``ValueError`` so callers that already guard key handling with
``except ValueError`` keep working.  Messages carry a prefix naming the
scheme (``"ed25519: ..."``) or subsystem (``"path: ..."``).
"""

from __future__ import annotations


class KeychainError(ValueError):
    """Base class for all suikeys errors."""


class InvalidInputError(KeychainError):
    """Wrong length, prefix, checksum, empty message or similar shape error."""


class UnsupportedSchemeError(InvalidInputError):
    """Unknown scheme flag or a scheme the operation does not handle."""


class MnemonicError(InvalidInputError):
    """Invalid BIP-39 phrase or entropy size."""


class KeyRangeError(KeychainError):
    """Scalar outside ``[1, n)`` or a degenerate BIP-32 child."""


class PathError(KeychainError):
    """Malformed derivation path, or a path not valid for a scheme."""


class IntentError(KeychainError):
    """Intent scope, version or app id failed validation."""


class VerificationError(KeychainError):
    """A well-formed signature did not verify."""


class BackendError(KeychainError):
    """Unexpected failure inside a cryptographic backend."""
