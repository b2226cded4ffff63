#!/usr/bin/env python3
"""Container Codec - On-disk encrypted vault format.

An encrypted vault is a JSON object carrying the KDF parameters it was
sealed with:

    {
      "salt_b64": "<base64 salt>",
      "kdf_iterations": 3,
      "kdf_memory_kib": 65536,
      "blob_b64": "<base64 nonce|ciphertext|tag>"
    }

A container is recognized by shape alone: all four fields present. The
sealed plaintext is the bare collection format.
"""

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from . import aead, kdf
from .collection import VaultCollection
from .errors import ParseError
from .kdf import CostParameters

logger = logging.getLogger("locbox.container")

CONTAINER_FIELDS = ("salt_b64", "kdf_iterations", "kdf_memory_kib", "blob_b64")


@dataclass(frozen=True)
class Container:
    """Decoded container: salt, cost parameters and sealed blob."""

    salt: bytes
    cost: CostParameters
    blob: bytes


def is_container_shape(obj: Any) -> bool:
    """True if obj carries every container field."""
    return isinstance(obj, dict) and all(name in obj for name in CONTAINER_FIELDS)


def encode(salt: bytes, cost: CostParameters, blob: bytes) -> bytes:
    """Serialize a container to UTF-8 JSON bytes."""
    obj = {
        "salt_b64": base64.b64encode(salt).decode("ascii"),
        "kdf_iterations": cost.iterations,
        "kdf_memory_kib": cost.memory_kib,
        "blob_b64": base64.b64encode(blob).decode("ascii"),
    }
    return json.dumps(obj, indent=2).encode("utf-8")


def decode(data: bytes) -> Container:
    """Parse container bytes.

    Raises:
        ParseError: If data is not JSON, lacks a field, or a field has
            the wrong type or invalid base64

    """
    try:
        obj = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(f"Invalid JSON: {e}") from e
    return decode_obj(obj)


def decode_obj(obj: Any) -> Container:
    """Validate an already-parsed JSON value as a container."""
    if not isinstance(obj, dict):
        raise ParseError("Container must be a JSON object")

    for name in CONTAINER_FIELDS:
        if name not in obj:
            raise ParseError(f"Container missing required field: {name}")

    for name in ("kdf_iterations", "kdf_memory_kib"):
        value = obj[name]
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ParseError(f"{name} must be an unsigned integer: {value!r}")

    return Container(
        salt=_b64decode(obj, "salt_b64"),
        cost=CostParameters(
            iterations=obj["kdf_iterations"],
            memory_kib=obj["kdf_memory_kib"]
        ),
        blob=_b64decode(obj, "blob_b64")
    )


def _b64decode(obj: dict, name: str) -> bytes:
    value = obj[name]
    if not isinstance(value, str):
        raise ParseError(f"{name} must be a base64 string")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ParseError(f"{name} is not valid base64: {e}") from e


def seal_collection(
    collection: VaultCollection,
    passphrase,
    cost: CostParameters = kdf.DEFAULT_COST
) -> bytes:
    """Encrypt a collection under a fresh salt and return container bytes."""
    salt = kdf.generate_salt()
    key = kdf.derive_key(passphrase, salt, cost)
    blob = aead.seal(key, collection.to_json())
    logger.debug("Sealed %d record(s) into container", len(collection))
    return encode(salt, cost, blob)


def serialize_for_save(
    collection: VaultCollection,
    passphrase=None,
    cost: Optional[CostParameters] = None
) -> bytes:
    """Produce the bytes to persist for a collection.

    Without a passphrase the bare (unencrypted) format is written; this
    must be chosen explicitly by the caller.
    """
    if passphrase is None:
        return collection.to_json(indent=2)
    return seal_collection(collection, passphrase, cost or kdf.DEFAULT_COST)
