"""
StateDocument — the root state model.

This is the single durable record of what appshelf has installed.
It's serialized to .appshelf/state.json, loaded at the start of every
session and saved after every user action.

Unlike a cache, it is NOT disposable: deleting it forgets which apps
are managed, so a file that cannot be parsed is an error, never a
reason to start over.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

AppStatus = Literal[
    "managed",
    "installed",
    "install_failed",
    "upgraded_or_ok",
    "upgrade_failed",
]


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ManagedAppEntry(BaseModel):
    """One application tracked by appshelf."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    package_id: str = Field(alias="packageId", min_length=1)
    pinned: bool = False
    last_seen_version: str | None = Field(default=None, alias="lastSeenVersion")
    last_status: AppStatus = Field(default="managed", alias="lastStatus")


class StateDocument(BaseModel):
    """Root state model — serialized to .appshelf/state.json."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # ── Identity ─────────────────────────────────────────────────
    version: str = ""

    # ── Timestamps ───────────────────────────────────────────────
    created_at: str = Field(default_factory=_now_iso, alias="createdAt")
    last_run_at: str = Field(default_factory=_now_iso, alias="lastRunAt")

    # ── Managed set (insertion order = registration order) ───────
    managed_apps: list[ManagedAppEntry] = Field(
        default_factory=list, alias="managedApps"
    )

    @field_validator("managed_apps", mode="before")
    @classmethod
    def _coerce_sequence(cls, value: Any) -> Any:
        # Older writers collapsed empty/singleton collections.
        if value is None:
            return []
        if isinstance(value, dict):
            return [value]
        return value

    def touch(self) -> None:
        """Update the last_run_at timestamp."""
        self.last_run_at = _now_iso()

    def get(self, package_id: str) -> ManagedAppEntry | None:
        """Look up a managed entry by package id."""
        for entry in self.managed_apps:
            if entry.package_id == package_id:
                return entry
        return None

    def package_ids(self) -> list[str]:
        """All managed package ids in registration order."""
        return [entry.package_id for entry in self.managed_apps]

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize using the on-disk (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)
