"""
Operation reports — what happened to each package in one user action.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutcomeStatus = Literal["ok", "failed", "skipped"]


@dataclass
class PackageOutcome:
    """Result for a single package within an operation."""

    package_id: str
    display_name: str = ""
    status: OutcomeStatus = "ok"
    exit_code: int | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    def to_dict(self) -> dict:
        return {
            "package_id": self.package_id,
            "display_name": self.display_name or self.package_id,
            "status": self.status,
            "exit_code": self.exit_code,
            "message": self.message,
        }


@dataclass
class OperationReport:
    """Result of running one operation over a batch of packages."""

    operation: str = ""
    outcomes: list[PackageOutcome] = field(default_factory=list)

    def add(self, outcome: PackageOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "skipped")

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def errors(self) -> list[str]:
        return [f"{o.package_id}: {o.message}" for o in self.outcomes if o.failed]

    def to_dict(self) -> dict:
        return {
            "operation": self.operation,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }
