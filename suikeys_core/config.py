"""
TOML-based configuration for suikeys.

Loads settings from a TOML file and/or environment variables.
Environment variables take precedence over file values.

Usage:
    from suikeys_core.config import load_config
    cfg = load_config("suikeys.toml")
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import,no-redef]

from suikeys_core.errors import InvalidInputError
from suikeys_core.mnemonic import VALID_STRENGTHS
from suikeys_core.scheme import Scheme


@dataclass
class KeysConfig:
    """Defaults used when creating or loading keypairs."""
    default_scheme: str = "ed25519"
    account: int = 0
    mnemonic_strength: int = 128
    # Environment variable holding a bech32 ``suiprivkey1...`` secret.
    private_key_env: str = "SUI_PRIVATE_KEY"
    keystore_iterations: int = 600_000

    def scheme(self) -> Scheme:
        return Scheme.from_label(self.default_scheme)


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    format: str = "human"   # "human" or "json"
    file: str | None = None


@dataclass
class SuiKeysConfig:
    """Top-level configuration container."""
    keys: KeysConfig = field(default_factory=KeysConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _merge(dc: Any, raw: dict[str, Any]) -> None:
    """Merge a raw dict into a dataclass instance (in-place)."""
    for key, value in raw.items():
        key_under = key.replace("-", "_")
        if hasattr(dc, key_under):
            setattr(dc, key_under, value)


def _int_env(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise InvalidInputError(f"config: {name} must be an integer, got {value!r}") from None


def _require_int(name: str, value: Any) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidInputError(f"config: {name} must be an integer, got {value!r}")


def _require_str(name: str, value: Any) -> None:
    if not isinstance(value, str):
        raise InvalidInputError(f"config: {name} must be a string, got {value!r}")


def _validate(cfg: SuiKeysConfig) -> None:
    for name in ("account", "mnemonic_strength", "keystore_iterations"):
        _require_int(f"keys.{name}", getattr(cfg.keys, name))
    for name in ("default_scheme", "private_key_env"):
        _require_str(f"keys.{name}", getattr(cfg.keys, name))
    _require_str("logging.level", cfg.logging.level)
    _require_str("logging.format", cfg.logging.format)
    if cfg.logging.file is not None:
        _require_str("logging.file", cfg.logging.file)

    cfg.keys.scheme()
    if cfg.keys.account < 0 or cfg.keys.account >= 0x80000000:
        raise InvalidInputError(f"config: account index out of range: {cfg.keys.account}")
    if cfg.keys.mnemonic_strength not in VALID_STRENGTHS:
        raise InvalidInputError(
            f"config: unsupported mnemonic strength {cfg.keys.mnemonic_strength}"
        )
    if cfg.keys.keystore_iterations < 1:
        raise InvalidInputError("config: keystore_iterations must be positive")
    if cfg.logging.format not in ("human", "json"):
        raise InvalidInputError(f"config: unknown log format {cfg.logging.format!r}")


def load_config(path: str | None = None) -> SuiKeysConfig:
    """
    Load configuration from a TOML file, then overlay environment variables.

    Env-var mapping:
        SUIKEYS_DEFAULT_SCHEME     -> keys.default_scheme
        SUIKEYS_ACCOUNT            -> keys.account
        SUIKEYS_MNEMONIC_STRENGTH  -> keys.mnemonic_strength
        SUIKEYS_LOG_LEVEL          -> logging.level
        SUIKEYS_LOG_FMT            -> logging.format
        SUIKEYS_LOG_FILE           -> logging.file
    """
    cfg = SuiKeysConfig()

    # ── TOML file ────────────────────────────────────────────────
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                data = tomllib.load(f)
            for section_name, section_dc in [
                ("keys", cfg.keys),
                ("logging", cfg.logging),
            ]:
                if section_name in data:
                    _merge(section_dc, data[section_name])

    # ── Environment variable overrides ───────────────────────────
    if v := os.environ.get("SUIKEYS_DEFAULT_SCHEME"):
        cfg.keys.default_scheme = v.strip().lower()
    if v := os.environ.get("SUIKEYS_ACCOUNT"):
        cfg.keys.account = _int_env("SUIKEYS_ACCOUNT", v)
    if v := os.environ.get("SUIKEYS_MNEMONIC_STRENGTH"):
        cfg.keys.mnemonic_strength = _int_env("SUIKEYS_MNEMONIC_STRENGTH", v)
    if v := os.environ.get("SUIKEYS_LOG_LEVEL"):
        cfg.logging.level = v.upper()
    if v := os.environ.get("SUIKEYS_LOG_FMT"):
        cfg.logging.format = v
    if v := os.environ.get("SUIKEYS_LOG_FILE"):
        cfg.logging.file = v

    _validate(cfg)
    return cfg


def keypair_from_env(
    cfg: SuiKeysConfig | None = None, environ: Mapping[str, str] | None = None,
):
    """Load the keypair stored as bech32 in ``cfg.keys.private_key_env``."""
    from suikeys_core.keypair import from_bech32

    cfg = cfg or SuiKeysConfig()
    env = os.environ if environ is None else environ
    name = cfg.keys.private_key_env
    value = env.get(name, "").strip()
    if not value:
        raise InvalidInputError(f"config: environment variable {name} is not set")
    return from_bech32(value)
