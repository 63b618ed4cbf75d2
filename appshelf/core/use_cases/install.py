"""
Install use case — install selected apps or a whole bundle.

Ties together the install flow, state persistence and the audit ledger.
An empty request or an unknown bundle is returned as ``error`` and
leaves state untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from appshelf.core.engine.installer import install_packages
from appshelf.core.engine.report import OperationReport
from appshelf.core.session import Session
from appshelf.errors import BackendUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Result of an install or bundle-install action."""

    report: OperationReport | None = None
    requested: list[str] = field(default_factory=list)
    bundle: str | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["requested"] = self.requested
        if self.bundle:
            result["bundle"] = self.bundle
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def install_apps(session: Session, package_ids: list[str], operation: str = "install") -> InstallResult:
    """Install packages by id, then persist state and audit the action."""
    result = InstallResult(requested=list(dict.fromkeys(package_ids)))
    if not result.requested:
        result.error = "Nothing to install."
        return result

    try:
        report = install_packages(
            session.state,
            session.backend,
            result.requested,
            catalog=session.catalog,
            operation=operation,
        )
    except BackendUnavailableError:
        session.persist()
        raise

    session.persist()
    session.record(report)
    result.report = report
    logger.info(
        "Install finished: %d/%d succeeded", report.succeeded, report.total
    )
    return result


def install_bundle(session: Session, bundle_name: str) -> InstallResult:
    """Install every app in a named bundle."""
    bundle = session.catalog.bundle(bundle_name)
    if bundle is None:
        available = ", ".join(sorted(session.catalog.bundles)) or "none"
        return InstallResult(error=f"Unknown bundle '{bundle_name}' (available: {available})")

    result = install_apps(session, bundle.apps, operation="bundle")
    result.bundle = bundle.name
    return result
