"""
Install flow — install packages one by one and register the successes.
"""

from __future__ import annotations

import logging

from appshelf.adapters.base import PackageBackend
from appshelf.core.engine.registration import ensure_managed, set_status
from appshelf.core.engine.report import OperationReport, PackageOutcome
from appshelf.core.models.catalog import Catalog
from appshelf.core.models.state import StateDocument

logger = logging.getLogger(__name__)


def install_packages(
    state: StateDocument,
    backend: PackageBackend,
    package_ids: list[str],
    catalog: Catalog | None = None,
    operation: str = "install",
) -> OperationReport:
    """Install each package and reconcile the result into state.

    Success registers the package (``managed``) and then marks it
    ``installed``. Failure marks an already-managed package
    ``install_failed``; an unmanaged package is not registered.
    Failures never stop the batch.
    """
    report = OperationReport(operation=operation)

    for package_id in dict.fromkeys(package_ids):
        name = catalog.display_name(package_id) if catalog else package_id
        result = backend.install(package_id)

        if result.ok:
            ensure_managed(state, package_id)
            set_status(state, package_id, "installed")
            report.add(PackageOutcome(package_id, name, "ok", exit_code=result.exit_code))
            continue

        set_status(state, package_id, "install_failed")
        logger.warning(
            "Install failed for %s (exit %d): %s",
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
