#!/usr/bin/env python3
"""Vault Collection - In-memory credential records with id assignment.

The serialized form is the bare (legacy) vault format:

    {"next_id": 3, "vault_items": [{"id": 1, "service": ..., "username": ...,
                                   "password": ...}, ...]}
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import ParseError


@dataclass(frozen=True)
class Record:
    """One stored credential."""

    id: int
    service: str
    username: str
    secret: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "service": self.service,
            "username": self.username,
            "password": self.secret,
        }

    @classmethod
    def from_dict(cls, obj: Any) -> "Record":
        """Build a record from its serialized form.

        Raises:
            ParseError: If a field is missing or has the wrong type

        """
        if not isinstance(obj, dict):
            raise ParseError("Vault item must be an object")

        for name in ("id", "service", "username", "password"):
            if name not in obj:
                raise ParseError(f"Vault item missing required field: {name}")

        record_id = obj["id"]
        if not _is_uint(record_id):
            raise ParseError(f"Vault item id must be an unsigned integer: {record_id!r}")

        for name in ("service", "username", "password"):
            if not isinstance(obj[name], str):
                raise ParseError(f"Vault item field {name} must be a string")

        return cls(
            id=record_id,
            service=obj["service"],
            username=obj["username"],
            secret=obj["password"]
        )


@dataclass
class VaultCollection:
    """Ordered record set. Ids are issued from next_id and never reused."""

    next_id: int = 1
    records: List[Record] = field(default_factory=list)

    def add(self, service: str, username: str, secret: str) -> Record:
        """Append a new record and return it."""
        record = Record(
            id=self.next_id,
            service=service,
            username=username,
            secret=secret
        )
        self.next_id += 1
        self.records.append(record)
        return record

    def remove(self, record_id: int) -> bool:
        """Remove the record with the given id.

        Returns:
            True if a record was removed, False if no record matched

        """
        for i, record in enumerate(self.records):
            if record.id == record_id:
                del self.records[i]
                return True
        return False

    def list(self) -> List[Record]:
        """Records in insertion order."""
        return list(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "next_id": self.next_id,
            "vault_items": [r.to_dict() for r in self.records],
        }

    def to_json(self, indent: Optional[int] = None) -> bytes:
        if indent is None:
            text = json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)
        else:
            text = json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)
        return text.encode("utf-8")

    @classmethod
    def from_dict(cls, obj: Any) -> "VaultCollection":
        """Parse the bare vault format.

        A next_id that does not exceed the largest stored id is raised to
        max_id + 1 so that ids are never issued twice.

        Raises:
            ParseError: If the structure is not a valid collection

        """
        if not isinstance(obj, dict):
            raise ParseError("Vault must be a JSON object")
        if "next_id" not in obj or "vault_items" not in obj:
            raise ParseError("Vault missing required field: next_id or vault_items")

        next_id = obj["next_id"]
        if not _is_uint(next_id):
            raise ParseError(f"next_id must be an unsigned integer: {next_id!r}")

        items = obj["vault_items"]
        if not isinstance(items, list):
            raise ParseError("vault_items must be a list")

        records = [Record.from_dict(item) for item in items]

        seen = set()
        for record in records:
            if record.id in seen:
                raise ParseError(f"Duplicate record id: {record.id}")
            seen.add(record.id)

        highest = max(seen, default=0)
        return cls(next_id=max(next_id, highest + 1, 1), records=records)

    @classmethod
    def from_json(cls, data: bytes) -> "VaultCollection":
        """Parse bare-format JSON bytes.

        Raises:
            ParseError: If the bytes are not valid JSON or not a collection

        """
        try:
            obj = json.loads(data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ParseError(f"Invalid JSON: {e}") from e
        return cls.from_dict(obj)


def _is_uint(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
