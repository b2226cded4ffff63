"""locbox - A lightweight, single-file password manager.
Encrypts the whole vault at rest with libsodium cryptography via pynacl.
"""

__version__ = "0.3.0"
