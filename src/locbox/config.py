#!/usr/bin/env python3
"""Settings - Defaults with environment overrides.

Recognized variables:
    LOCBOX_DB              vault file path (default: db.json)
    LOCBOX_KDF_ITERATIONS  Argon2 iterations for new saves (default: 3)
    LOCBOX_KDF_MEMORY_KIB  Argon2 memory in KiB for new saves (default: 65536)
    LOCBOX_AUDIT_LOG       append-only operation log path (default: disabled)

The passphrase variable LOCBOX_PASSWORD is read by secret.get_password.

Security Note:
    Settings never carry the passphrase or key material.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .kdf import DEFAULT_ITERATIONS, DEFAULT_MEMORY_KIB, CostParameters

DEFAULT_DB = Path("db.json")


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


@dataclass
class Settings:
    """Resolved runtime settings."""

    db_path: Path = DEFAULT_DB
    cost: CostParameters = CostParameters()
    audit_log: Optional[Path] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ValueError: If a numeric variable is not a non-negative integer
        """
        env = os.environ if env is None else env
        audit_log = env.get("LOCBOX_AUDIT_LOG")
        return cls(
            db_path=Path(env.get("LOCBOX_DB") or DEFAULT_DB),
            cost=CostParameters(
                iterations=_env_int(env, "LOCBOX_KDF_ITERATIONS", DEFAULT_ITERATIONS),
                memory_kib=_env_int(env, "LOCBOX_KDF_MEMORY_KIB", DEFAULT_MEMORY_KIB)
            ),
            audit_log=Path(audit_log) if audit_log else None
        )
