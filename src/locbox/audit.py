#!/usr/bin/env python3
"""Audit Logger - Append-only record of vault operations.

One line per operation, never containing secret values:

    ISO8601Z [pid] RESULT ACTION target [reason]
"""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

RESULTS = ("OK", "EMPTY", "DENIED", "NOT_FOUND", "ERROR")


class AuditLogger:
    """Append-only operation log with owner-only permissions."""

    def __init__(self, log_path: Path):
        """Initialize audit logger.

        Args:
            log_path: Path to the log file; parent directories are created

        """
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.log_path.exists():
            fd = os.open(
                str(self.log_path),
                os.O_CREAT | os.O_APPEND | os.O_WRONLY,
                0o600
            )
            os.close(fd)

    def log(
        self,
        result: str,
        action: str,
        target: str,
        reason: Optional[str] = None
    ) -> None:
        """Append one operation line.

        Args:
            result: One of RESULTS
            action: LOAD | SAVE | ADD | REMOVE | LIST
            target: Vault path or record id
            reason: Optional detail for DENIED/ERROR

        """
        if result not in RESULTS:
            raise ValueError(f"Unknown audit result: {result}")

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
        parts = [timestamp, f"[{os.getpid()}]", result, action, str(target)]
        if reason:
            parts.append(reason)

        with open(self.log_path, "a") as f:
            f.write(" ".join(parts) + "\n")

    def read_recent(self, lines: int = 100) -> List[str]:
        """Read recent log entries, most recent last."""
        if not self.log_path.exists():
            return []

        with open(self.log_path) as f:
            return f.readlines()[-lines:]


class NullAuditLogger:
    """Stand-in used when auditing is disabled."""

    def log(self, result, action, target, reason=None) -> None:
        pass

    def read_recent(self, lines: int = 100) -> List[str]:
        return []


def get_audit_logger(log_path: Optional[Path]):
    """Return an AuditLogger for log_path, or a no-op logger if None."""
    if log_path is None:
        return NullAuditLogger()
    return AuditLogger(log_path)
