#!/usr/bin/env python3
"""locbox - A lightweight CLI password manager.

Keeps credentials in a single JSON file, encrypted at rest with a key
derived from the master password (Argon2i + XChaCha20-Poly1305 via pynacl).
"""

import argparse
import logging
import sys
from contextlib import contextmanager
from pathlib import Path

from . import __version__
from .audit import get_audit_logger
from .config import Settings
from .errors import DerivationError, PassphraseRequired, VaultIOError
from .loader import LoadStatus
from .secret import get_password
from .vault import load_vault, save_vault


def get_db_path(args, settings):
    """Get vault path from args or settings."""
    return Path(args.db) if args.db else settings.db_path


def fail(message):
    print(message, file=sys.stderr)
    sys.exit(1)


@contextmanager
def master_secret(args):
    """Yield the master password for this run, wiped afterwards.

    Yields None in --plaintext mode.
    """
    if args.plaintext:
        yield None
        return

    with get_password("Enter master password: ") as secret:
        yield secret


def confirm_new_encryption(result, secret):
    """Ask for the password again before the first encrypted save.

    Needed whenever the loaded vault was not already encrypted (missing,
    empty or legacy plaintext), since the save seals it under this password.
    """
    if secret is None or result.encrypted:
        return
    with get_password("Confirm master password: ") as again:
        if bytes(secret) != bytes(again):
            fail("Passwords do not match")


def load_or_exit(db_path, secret, audit):
    """Load the vault, exiting with a message on any failure."""
    try:
        result = load_vault(db_path, secret)
    except PassphraseRequired:
        audit.log("DENIED", "LOAD", db_path, "passphrase-required")
        fail(f"Vault is encrypted: {db_path} (run without --plaintext)")
    except DerivationError as e:
        audit.log("ERROR", "LOAD", db_path, "derivation")
        fail(f"Key derivation failed: {e}")
    except VaultIOError as e:
        audit.log("ERROR", "LOAD", db_path, "io")
        fail(str(e))

    if result.status is LoadStatus.WRONG_PASSPHRASE_OR_CORRUPT:
        audit.log("DENIED", "LOAD", db_path, "wrong-passphrase-or-corrupt")
        fail("Invalid password or corrupted vault")

    audit.log("OK" if result.status is LoadStatus.LOADED else "EMPTY", "LOAD", db_path)
    return result


def save_or_exit(db_path, collection, secret, settings, audit):
    """Persist the vault, exiting with a message on failure."""
    try:
        save_vault(db_path, collection, secret, settings.cost)
    except DerivationError as e:
        audit.log("ERROR", "SAVE", db_path, "derivation")
        fail(f"Key derivation failed: {e}")
    except VaultIOError as e:
        audit.log("ERROR", "SAVE", db_path, "io")
        fail(str(e))
    audit.log("OK", "SAVE", db_path)


def cmd_add(args, settings):
    """Add a new entry."""
    db_path = get_db_path(args, settings)
    audit = get_audit_logger(settings.audit_log)

    with master_secret(args) as secret:
        result = load_or_exit(db_path, secret, audit)
        confirm_new_encryption(result, secret)
        record = result.collection.add(args.service, args.username, args.password)
        save_or_exit(db_path, result.collection, secret, settings, audit)

    audit.log("OK", "ADD", record.id)
    print("Added the following:")
    print(f"ID: {record.id}")
    print(f"Service: {record.service}")
    print(f"Username: {record.username}")
    print(f"Password: {record.secret}")


def cmd_remove(args, settings):
    """Remove an entry by id."""
    db_path = get_db_path(args, settings)
    audit = get_audit_logger(settings.audit_log)

    with master_secret(args) as secret:
        result = load_or_exit(db_path, secret, audit)
        if not result.collection.remove(args.id):
            audit.log("NOT_FOUND", "REMOVE", args.id)
            fail(f"Unable to find service with the ID: {args.id}")
        confirm_new_encryption(result, secret)
        save_or_exit(db_path, result.collection, secret, settings, audit)

    audit.log("OK", "REMOVE", args.id)
    print(f"Removed Service with ID: {args.id}")


def cmd_list(args, settings):
    """List entries."""
    db_path = get_db_path(args, settings)
    audit = get_audit_logger(settings.audit_log)

    with master_secret(args) as secret:
        result = load_or_exit(db_path, secret, audit)

    audit.log("OK", "LIST", db_path)
    for record in result.collection.list():
        print(f"{record.id} | {record.service} | {record.username} | {record.secret}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='locbox',
        description="Lightweight CLI password manager."
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument('--db', help='Path to vault file (default: $LOCBOX_DB or db.json)')
    parser.add_argument('--plaintext', action='store_true',
                        help='Read and write the unencrypted legacy format')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # add
    add_parser = subparsers.add_parser('add', help='Add an entry')
    add_parser.add_argument('service', help='Service name')
    add_parser.add_argument('username', help='Username')
    add_parser.add_argument('password', help='Password to store')

    # remove
    remove_parser = subparsers.add_parser('remove', help='Remove an entry')
    remove_parser.add_argument('id', type=int, help='Entry ID')

    # list
    subparsers.add_parser('list', help='List entries')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr
    )

    try:
        settings = Settings.from_env()
    except ValueError as e:
        fail(str(e))

    commands = {
        'add': cmd_add,
        'remove': cmd_remove,
        'list': cmd_list,
    }

    commands[args.command](args, settings)


if __name__ == '__main__':
    main()
