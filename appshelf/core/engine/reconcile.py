"""
Reconciliation engine — find and apply upgrades for managed apps.

Two phases, each strictly sequential:

    discover: dry-check every unpinned entry → ordered candidate ids
    apply:    upgrade each candidate → status upgraded_or_ok / upgrade_failed

Discovery classifies by output text only. Winget has no structured
"nothing to do" signal and its exit codes for informational calls are
not reliable, so any non-empty output that is not a known no-op phrase
makes the package a candidate, whatever the exit code. Apply treats the
exit code as authoritative.

A failed upgrade never stops the loop. A BackendUnavailableError
(backend could not be started) propagates and ends the run.
"""

from __future__ import annotations

import logging

from appshelf.adapters.base import PackageBackend
from appshelf.core.engine.registration import set_status
from appshelf.core.engine.report import OperationReport, PackageOutcome
from appshelf.core.models.catalog import Catalog
from appshelf.core.models.state import StateDocument
from appshelf.core.persistence.state_file import NOT_FOUND, find_index

logger = logging.getLogger(__name__)

NO_UPDATE_PHRASES = (
    "No applicable update found",
    "No installed package found",
    "No available upgrade found",
)


def has_pending_update(output: str) -> bool:
    """Classify dry-check output.

    False for empty output or output containing a known no-op phrase,
    True for anything else.
    """
    text = output.strip()
    if not text:
        return False
    folded = text.casefold()
    return not any(phrase.casefold() in folded for phrase in NO_UPDATE_PHRASES)


def discover_candidates(state: StateDocument, backend: PackageBackend) -> list[str]:
    """Return unpinned managed ids with a pending update, in registration order."""
    candidates: list[str] = []

    for entry in list(state.managed_apps):
        if entry.pinned:
            logger.debug("Skipping pinned %s", entry.package_id)
            continue

        result = backend.upgrade(entry.package_id, check=True)
        if has_pending_update(result.combined_output):
            logger.info("Update available: %s", entry.package_id)
            candidates.append(entry.package_id)
        else:
            logger.debug("Up to date: %s", entry.package_id)

    return candidates


def apply_upgrades(
    state: StateDocument,
    backend: PackageBackend,
    candidates: list[str],
    catalog: Catalog | None = None,
) -> OperationReport:
    """Upgrade each candidate in order and record the outcome in state."""
    report = OperationReport(operation="update")

    for package_id in candidates:
        name = catalog.display_name(package_id) if catalog else package_id
        idx = find_index(state, package_id)

        if idx == NOT_FOUND:
            logger.warning("Skipping %s: no longer managed", package_id)
            report.add(PackageOutcome(package_id, name, "skipped", message="not managed"))
            continue
        if state.managed_apps[idx].pinned:
            logger.info("Skipping %s: pinned", package_id)
            report.add(PackageOutcome(package_id, name, "skipped", message="pinned"))
            continue

        result = backend.upgrade(package_id)

        if result.ok:
            set_status(state, package_id, "upgraded_or_ok")
            report.add(PackageOutcome(package_id, name, "ok", exit_code=result.exit_code))
        else:
            set_status(state, package_id, "upgrade_failed")
            logger.warning(
                "Upgrade failed for %s (exit %d): %s",
                package_id,
                result.exit_code,
                result.error_text,
            )
            report.add(
                PackageOutcome(
                    package_id,
                    name,
                    "failed",
                    exit_code=result.exit_code,
                    message=result.error_text,
                )
            )

    return report


def reconcile(
    state: StateDocument,
    backend: PackageBackend,
    catalog: Catalog | None = None,
) -> tuple[list[str], OperationReport]:
    """Discover candidates, then apply them."""
    candidates = discover_candidates(state, backend)
    report = apply_upgrades(state, backend, candidates, catalog)
    return candidates, report
