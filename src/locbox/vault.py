#!/usr/bin/env python3
"""Vault - Load and save a collection at a file path.

Joins the atomic file store with the format loader and container codec.
"""

import logging
from pathlib import Path
from typing import Optional

from . import container, loader, storage
from .collection import VaultCollection
from .kdf import CostParameters

logger = logging.getLogger("locbox.vault")


def load_vault(path, passphrase=None) -> loader.LoadResult:
    """Read and decode the vault at path.

    A missing file yields an empty collection. See loader.load for the
    other outcomes and the exceptions raised.
    """
    raw = storage.read_bytes(Path(path))
    result = loader.load(raw, passphrase)
    logger.debug("Loaded %s: %s", path, result.status.value)
    return result


def save_vault(
    path,
    collection: VaultCollection,
    passphrase=None,
    cost: Optional[CostParameters] = None
) -> None:
    """Serialize the collection and replace the file at path atomically.

    With passphrase=None the bare plaintext format is written.
    """
    data = container.serialize_for_save(collection, passphrase, cost)
    storage.write_atomic(Path(path), data)
