"""Pytest fixtures and utilities for locbox tests."""

import os
import tempfile
from pathlib import Path

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from locbox.collection import VaultCollection
from locbox.container import serialize_for_save
from locbox.kdf import CostParameters


# Smallest cost libsodium accepts for Argon2i; keeps tests fast.
FAST_COST = CostParameters(iterations=3, memory_kib=8)


@pytest.fixture
def temp_vault_dir():
    """Create a temporary directory for vault files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fast_cost():
    """Low-cost KDF parameters."""
    return FAST_COST


@pytest.fixture
def sample_collection():
    """A collection with three records, the first one removed."""
    collection = VaultCollection()
    collection.add("github", "alice", "p@ss1")
    collection.add("gitlab", "bob", "hunter2")
    collection.add("email", "carol@example.com", "s3cret!")
    collection.remove(1)
    return collection


@pytest.fixture
def test_vault(temp_vault_dir, sample_collection):
    """Write an encrypted vault with test data."""
    vault_path = temp_vault_dir / "db.json"
    password = "correct123"

    vault_path.write_bytes(
        serialize_for_save(sample_collection, password.encode("utf-8"), FAST_COST)
    )

    return {
        "path": vault_path,
        "password": password,
        "collection": sample_collection,
    }


@pytest.fixture
def legacy_vault(temp_vault_dir, sample_collection):
    """Write an unencrypted bare-format vault."""
    vault_path = temp_vault_dir / "legacy.json"
    vault_path.write_bytes(sample_collection.to_json(indent=2))
    return {"path": vault_path, "collection": sample_collection}


@pytest.fixture(autouse=True)
def env_cleanup(monkeypatch):
    """Keep LOCBOX_* variables from the outer environment out of tests."""
    for name in list(os.environ):
        if name.startswith("LOCBOX_"):
            monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def cli_env(monkeypatch, temp_vault_dir):
    """Environment for running the CLI non-interactively."""
    db_path = temp_vault_dir / "db.json"
    monkeypatch.setenv("LOCBOX_PASSWORD", "correct123")
    monkeypatch.setenv("LOCBOX_DB", str(db_path))
    monkeypatch.setenv("LOCBOX_KDF_ITERATIONS", str(FAST_COST.iterations))
    monkeypatch.setenv("LOCBOX_KDF_MEMORY_KIB", str(FAST_COST.memory_kib))
    yield {"db": db_path, "password": "correct123"}
