#!/usr/bin/env python3
"""Format Loader - Turn vault file bytes into a collection.

Recognizes the encrypted container and the legacy bare format. The outcome
is a tagged LoadResult so that a wrong passphrase is never mistaken for an
empty vault:

    LOADED                      collection parsed (encrypted or legacy)
    EMPTY_DEFAULT               no file, empty file, or unreadable noise
    WRONG_PASSPHRASE_OR_CORRUPT container failed authentication or has
                                undecodable fields

Anything shaped like a container is never treated as noise, so a damaged
encrypted vault cannot be replaced by an empty one on the next save.
"""

import enum
import json
import logging
from dataclasses import dataclass
from typing import Optional

from . import aead, container, kdf
from .collection import VaultCollection
from .errors import (
    AuthenticationFailed,
    ParseError,
    PassphraseRequired,
    WrongPassphraseOrCorrupt,
)

logger = logging.getLogger("locbox.loader")


class LoadStatus(enum.Enum):
    LOADED = "loaded"
    EMPTY_DEFAULT = "empty-default"
    WRONG_PASSPHRASE_OR_CORRUPT = "wrong-passphrase-or-corrupt"


@dataclass
class LoadResult:
    """Outcome of loading a vault."""

    status: LoadStatus
    collection: Optional[VaultCollection] = None
    encrypted: bool = False
    reason: str = ""

    def unwrap(self) -> VaultCollection:
        """Return the collection, or raise if the vault could not be opened.

        Raises:
            WrongPassphraseOrCorrupt: If authentication failed

        """
        if self.status is LoadStatus.WRONG_PASSPHRASE_OR_CORRUPT:
            raise WrongPassphraseOrCorrupt(self.reason or "Wrong passphrase or corrupted vault")
        return self.collection


def empty_default(reason: str = "") -> LoadResult:
    return LoadResult(
        status=LoadStatus.EMPTY_DEFAULT,
        collection=VaultCollection(),
        reason=reason
    )


def load(raw: Optional[bytes], passphrase=None) -> LoadResult:
    """Load a collection from raw file bytes.

    Args:
        raw: File contents, or None if the file does not exist
        passphrase: Passphrase bytes or MasterSecret; None selects
            plaintext mode

    Returns:
        LoadResult tagged with the outcome

    Raises:
        PassphraseRequired: If the file is encrypted and no passphrase was given
        DerivationError: If the stored cost parameters or passphrase are rejected

    """
    if raw is None:
        return empty_default("no vault file")
    if not raw.strip():
        return empty_default("vault file is empty")

    try:
        obj = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Vault file is not JSON, starting empty: %s", e)
        return empty_default("vault file is not JSON")

    if container.is_container_shape(obj):
        if passphrase is None:
            raise PassphraseRequired("Vault is encrypted; a passphrase is required")
        try:
            sealed = container.decode_obj(obj)
        except ParseError as e:
            logger.warning("Container is corrupted: %s", e)
            return LoadResult(
                status=LoadStatus.WRONG_PASSPHRASE_OR_CORRUPT,
                encrypted=True,
                reason=f"Corrupted container: {e}"
            )
        return _open_container(sealed, passphrase)

    try:
        collection = VaultCollection.from_dict(obj)
    except ParseError as e:
        logger.warning("Unrecognized vault format, starting empty: %s", e)
        return empty_default(str(e))

    if passphrase is not None:
        logger.info("Loaded legacy plaintext vault; it will be encrypted on save")
    return LoadResult(status=LoadStatus.LOADED, collection=collection, encrypted=False)


def _open_container(sealed: container.Container, passphrase) -> LoadResult:
    key = kdf.derive_key(passphrase, sealed.salt, sealed.cost)
    try:
        plaintext = aead.open_blob(key, sealed.blob)
    except AuthenticationFailed as e:
        logger.debug("Container authentication failed")
        return LoadResult(
            status=LoadStatus.WRONG_PASSPHRASE_OR_CORRUPT,
            encrypted=True,
            reason=str(e)
        )

    try:
        collection = VaultCollection.from_json(plaintext)
    except ParseError as e:
        return LoadResult(
            status=LoadStatus.WRONG_PASSPHRASE_OR_CORRUPT,
            encrypted=True,
            reason=f"Decrypted vault is malformed: {e}"
        )

    logger.debug("Opened container with %d record(s)", len(collection))
    return LoadResult(status=LoadStatus.LOADED, collection=collection, encrypted=True)
