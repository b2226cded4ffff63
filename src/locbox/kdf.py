#!/usr/bin/env python3
"""Key Derivation - Passphrase to symmetric key via Argon2i.

Uses libsodium's Argon2i through pynacl. The cost parameters travel with
every container so a file can always be reopened with the same settings
it was written with.
"""

import logging
import time
from dataclasses import dataclass

import nacl.exceptions
import nacl.pwhash.argon2i
import nacl.utils

from .errors import DerivationError

logger = logging.getLogger("locbox.kdf")

KEY_SIZE = 32
SALT_SIZE = nacl.pwhash.argon2i.SALTBYTES  # 16

OPSLIMIT_MIN = nacl.pwhash.argon2i.OPSLIMIT_MIN
OPSLIMIT_MAX = nacl.pwhash.argon2i.OPSLIMIT_MAX
MEMLIMIT_MIN = nacl.pwhash.argon2i.MEMLIMIT_MIN
MEMLIMIT_MAX = nacl.pwhash.argon2i.MEMLIMIT_MAX

DEFAULT_ITERATIONS = 3
DEFAULT_MEMORY_KIB = 1 << 16  # 64 MiB


@dataclass(frozen=True)
class CostParameters:
    """Argon2 work factors stored alongside the ciphertext.

    ``memory_kib`` is the Argon2 memory cost in KiB (written to the container
    as ``kdf_memory_kib``); ``memory_cost_kib`` is an alias for it.
    """

    iterations: int = DEFAULT_ITERATIONS
    memory_kib: int = DEFAULT_MEMORY_KIB

    @property
    def memory_cost_kib(self) -> int:
        return self.memory_kib

    @property
    def memlimit(self) -> int:
        """Memory cost in bytes, as libsodium expects it."""
        return self.memory_kib * 1024


DEFAULT_COST = CostParameters()


def generate_salt() -> bytes:
    """Return a fresh random salt. Never reuse one across saves."""
    return nacl.utils.random(SALT_SIZE)


def derive_key(
    passphrase: bytes,
    salt: bytes,
    cost: CostParameters = DEFAULT_COST,
    length: int = KEY_SIZE
) -> bytes:
    """Derive a symmetric key from a passphrase using Argon2i.

    Args:
        passphrase: Raw passphrase bytes (must not be empty)
        salt: 16-byte salt stored with the container
        cost: Iteration count and memory cost
        length: Output key length in bytes

    Returns:
        Key bytes of the requested length

    Raises:
        DerivationError: If the inputs are rejected or derivation fails

    """
    if not passphrase:
        raise DerivationError("Passphrase must not be empty")
    if len(salt) != SALT_SIZE:
        raise DerivationError(
            f"Salt must be exactly {SALT_SIZE} bytes, got {len(salt)}"
        )
    if not (OPSLIMIT_MIN <= cost.iterations <= OPSLIMIT_MAX):
        raise DerivationError(
            f"kdf_iterations must be between {OPSLIMIT_MIN} and {OPSLIMIT_MAX}, "
            f"got {cost.iterations}"
        )
    if not (MEMLIMIT_MIN <= cost.memlimit <= MEMLIMIT_MAX):
        raise DerivationError(
            f"kdf_memory_kib must be between {MEMLIMIT_MIN // 1024} and "
            f"{MEMLIMIT_MAX // 1024}, got {cost.memory_kib}"
        )

    started = time.monotonic()
    try:
        key = nacl.pwhash.argon2i.kdf(
            length,
            bytes(passphrase),
            bytes(salt),
            opslimit=cost.iterations,
            memlimit=cost.memlimit
        )
    except MemoryError as e:
        raise DerivationError(
            f"Not enough memory for kdf_memory_kib={cost.memory_kib}"
        ) from e
    except nacl.exceptions.CryptoError as e:
        raise DerivationError(f"Key derivation failed: {e}") from e

    logger.debug(
        "Derived key (iterations=%d, memory_kib=%d) in %.0f ms",
        cost.iterations, cost.memory_kib, (time.monotonic() - started) * 1000
    )
    return key
