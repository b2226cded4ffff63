#!/usr/bin/env python3
"""Authenticated encryption for the serialized vault.

XChaCha20-Poly1305 via libsodium. Each seal draws a fresh 24-byte nonce
and prepends it, so a blob is self-contained:

    nonce (24) | ciphertext | tag (16)
"""

import nacl.bindings
import nacl.exceptions
import nacl.utils

from .errors import AuthenticationFailed

KEY_SIZE = nacl.bindings.crypto_aead_xchacha20poly1305_ietf_KEYBYTES
NONCE_SIZE = nacl.bindings.crypto_aead_xchacha20poly1305_ietf_NPUBBYTES
TAG_SIZE = nacl.bindings.crypto_aead_xchacha20poly1305_ietf_ABYTES


def _check_key(key: bytes) -> None:
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be exactly {KEY_SIZE} bytes, got {len(key)}")


def seal(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt and authenticate plaintext, returning nonce + ciphertext."""
    _check_key(key)
    nonce = nacl.utils.random(NONCE_SIZE)
    ciphertext = nacl.bindings.crypto_aead_xchacha20poly1305_ietf_encrypt(
        bytes(plaintext), None, nonce, bytes(key)
    )
    return nonce + ciphertext


def open_blob(key: bytes, blob: bytes) -> bytes:
    """Verify and decrypt a sealed blob.

    Raises:
        AuthenticationFailed: If the blob is truncated, tampered with or
            was sealed under a different key

    """
    _check_key(key)
    if len(blob) < NONCE_SIZE + TAG_SIZE:
        raise AuthenticationFailed("Sealed blob is truncated")

    nonce, ciphertext = bytes(blob[:NONCE_SIZE]), bytes(blob[NONCE_SIZE:])
    try:
        return nacl.bindings.crypto_aead_xchacha20poly1305_ietf_decrypt(
            ciphertext, None, nonce, bytes(key)
        )
    except nacl.exceptions.CryptoError as e:
        raise AuthenticationFailed("Decryption failed: wrong key or corrupted data") from e
