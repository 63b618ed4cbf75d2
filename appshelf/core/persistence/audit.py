"""
Audit ledger — append-only history of user actions.

Every install, bundle install and update run appends one entry to an
NDJSON (newline-delimited JSON) file next to the state file. The state
document says what is managed *now*; the ledger says what happened and
when.

The ledger is append-only: entries are never modified or deleted.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def generate_operation_id() -> str:
    """Short, sortable-enough identifier for one user action."""
    stamp = datetime.now(UTC).strftime("%Y%m%d%H%M%S")
    return f"op-{stamp}-{uuid.uuid4().hex[:6]}"


class AuditEntry(BaseModel):
    """A single audit log entry."""

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    operation_id: str = Field(default_factory=generate_operation_id)
    operation_type: str = ""       # install, bundle, update, check, pin

    # What happened
    packages: list[str] = Field(default_factory=list)

    # Results
    status: str = ""               # ok, partial, failed
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0

    # Errors (if any)
    errors: list[str] = Field(default_factory=list)

    # Extensible context
    context: dict[str, Any] = Field(default_factory=dict)


class AuditWriter:
    """Append-only audit ledger writer.

    Each call to write() appends a single JSON line to the ledger file.
    The file is created if it doesn't exist. Ledger failures are logged
    and never interrupt the user action.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: AuditEntry) -> None:
        """Append an audit entry to the ledger."""
        line = json.dumps(entry.model_dump(mode="json"), ensure_ascii=False) + "\n"

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line)
            logger.debug("Audit entry written: %s/%s", entry.operation_type, entry.operation_id)
        except OSError as e:
            logger.error("Failed to write audit entry: %s", e)

    def read_all(self) -> list[AuditEntry]:
        """Read all entries from the ledger, oldest first."""
        if not self._path.is_file():
            return []

        entries = []
        try:
            with self._path.open("r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entries.append(AuditEntry.model_validate(json.loads(line)))
                    except ValueError as e:
                        logger.warning("Skipping corrupt audit entry at line %d: %s", line_num, e)
        except OSError as e:
            logger.error("Failed to read audit ledger: %s", e)

        return entries

    def read_recent(self, n: int = 20) -> list[AuditEntry]:
        """Read the most recent N entries."""
        return self.read_all()[-n:]
