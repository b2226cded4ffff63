#!/usr/bin/env python3
"""Master Secret - Scoped, wipeable holder for the vault passphrase.

The passphrase is kept in a bytearray so it can be overwritten once the
key has been derived. Python makes transient immutable copies when calling
into libsodium; those cannot be wiped, but the long-lived copy can.
"""

import getpass
import os
from typing import Union

PASSWORD_ENV = "LOCBOX_PASSWORD"


class MasterSecret:
    """Passphrase buffer, wiped on exit from a ``with`` block."""

    def __init__(self, passphrase: Union[str, bytes, bytearray]):
        if isinstance(passphrase, str):
            passphrase = passphrase.encode("utf-8")
        self._buf = bytearray(passphrase)

    def __enter__(self) -> "MasterSecret":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __bytes__(self) -> bytes:
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    def __repr__(self) -> str:
        return "MasterSecret(<redacted>)"

    @property
    def wiped(self) -> bool:
        return not self._buf

    def wipe(self) -> None:
        """Overwrite the buffer with zeros, then drop it."""
        for i in range(len(self._buf)):
            self._buf[i] = 0
        del self._buf[:]


def get_password(prompt="Enter master password: "):
    """Get password from environment variable or prompt.

    Checks LOCBOX_PASSWORD first for automation/testing. Falls back to an
    interactive getpass prompt if it is not set.

    Security note: passwords in environment variables may be visible in
    process listings. Only use LOCBOX_PASSWORD in isolated environments.
    """
    env_password = os.environ.get(PASSWORD_ENV)
    if env_password:
        return MasterSecret(env_password)
    return MasterSecret(getpass.getpass(prompt))
