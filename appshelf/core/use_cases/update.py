"""
Update use case — check for and apply upgrades of managed apps.

Discovery and apply are separate calls so interactive callers can show
the candidate list and ask for confirmation in between.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from appshelf.core.engine.reconcile import apply_upgrades, discover_candidates
from appshelf.core.engine.report import OperationReport
from appshelf.core.session import Session
from appshelf.errors import BackendUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class Candidate:
    package_id: str
    display_name: str

    def to_dict(self) -> dict:
        return {"package_id": self.package_id, "display_name": self.display_name}


@dataclass
class UpdateResult:
    """Result of checking and (optionally) applying updates."""

    candidates: list[Candidate] = field(default_factory=list)
    report: OperationReport | None = None
    checked: int = 0
    pinned: int = 0

    @property
    def candidate_ids(self) -> list[str]:
        return [c.package_id for c in self.candidates]

    def to_dict(self) -> dict:
        result: dict = {}
        result["checked"] = self.checked
        result["pinned"] = self.pinned
        result["candidates"] = [c.to_dict() for c in self.candidates]
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def check_updates(session: Session) -> UpdateResult:
    """Run discovery only; persists to refresh last_run_at."""
    state = session.state
    result = UpdateResult(
        checked=sum(1 for e in state.managed_apps if not e.pinned),
        pinned=sum(1 for e in state.managed_apps if e.pinned),
    )

    if not state.managed_apps:
        session.persist()
        return result

    ids = discover_candidates(state, session.backend)
    result.candidates = [Candidate(pid, session.catalog.display_name(pid)) for pid in ids]
    session.persist()
    logger.info("%d of %d managed apps have updates", len(ids), result.checked)
    return result


def apply_updates(session: Session, candidates: list[str] | None = None) -> UpdateResult:
    """Apply upgrades to ``candidates`` (discovering them first if None).

    A run with nothing to upgrade is persisted but not audited.
    """
    if candidates is None:
        result = check_updates(session)
    else:
        result = UpdateResult(
            candidates=[Candidate(pid, session.catalog.display_name(pid)) for pid in candidates],
        )

    try:
        report = apply_upgrades(
            session.state,
            session.backend,
            result.candidate_ids,
            catalog=session.catalog,
        )
    except BackendUnavailableError:
        session.persist()
        raise

    session.persist()
    if report.total:
        session.record(report, candidates=len(result.candidates))
    result.report = report
    return result
