"""
BackendResult — the execution contract between core and backend.

Every backend call returns one of these. A non-zero exit code is an
ordinary value the engine branches on, never an exception.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class BackendResult(BaseModel):
    """Outcome of a single install/upgrade invocation."""

    package_id: str
    operation: Literal["install", "upgrade"]
    mode: Literal["apply", "check"] = "apply"

    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the backend reported success."""
        return self.exit_code == 0

    @property
    def combined_output(self) -> str:
        """stdout and stderr joined — the only channel for no-op detection."""
        parts = [p.strip() for p in (self.stdout, self.stderr) if p and p.strip()]
        return "\n".join(parts)

    @property
    def error_text(self) -> str:
        """Best-effort failure description for logs."""
        return (
            self.stderr.strip()
            or self.stdout.strip()
            or f"Backend exited with code {self.exit_code}"
        )
