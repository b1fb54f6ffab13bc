"""
suikeys - cryptographic identity core for the Sui chain SDK.

Key features:
- Ed25519, secp256k1 and secp256r1 keypairs with chain addresses
- BIP-39 mnemonics, BIP-32 and SLIP-0010 hierarchical derivation
- Intent-prefixed personal-message and transaction signing
- RFC 6979 deterministic ECDSA for P-256
- bech32 ``suiprivkey`` import / export and an encrypted keystore
"""

__version__ = "0.1.0"
__all__ = [
    "bcs",
    "config",
    "derivation_path",
    "ed25519",
    "errors",
    "hd",
    "intent",
    "keypair",
    "keystore",
    "logging_config",
    "mnemonic",
    "rfc6979",
    "scheme",
    "secp256k1",
    "secp256r1",
    "signing",
    "type_tag",
    "utils",
]
