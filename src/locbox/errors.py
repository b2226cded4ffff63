#!/usr/bin/env python3
"""Exception types raised by the vault core.

Library code raises these; only the CLI turns them into messages and
exit codes.
"""


class VaultError(Exception):
    """Base class for all locbox errors."""


class VaultIOError(VaultError):
    """Reading, creating or renaming the vault file failed."""


class ParseError(VaultError):
    """Input is not a well-formed container or bare collection."""


class DerivationError(VaultError):
    """Key derivation rejected the passphrase, salt or cost parameters."""


class AuthenticationFailed(VaultError):
    """Ciphertext failed authentication (wrong key or tampered blob)."""


class WrongPassphraseOrCorrupt(AuthenticationFailed):
    """An encrypted vault could not be opened with the given passphrase."""


class PassphraseRequired(VaultError):
    """The vault is encrypted but no passphrase was supplied."""
