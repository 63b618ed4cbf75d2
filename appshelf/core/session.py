"""
Session — everything one run of appshelf works against.

Opening a session loads the catalog and the state document; both
failures are fatal. Every user action mutates ``session.state`` in
place and then calls ``persist()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from appshelf.adapters.base import PackageBackend
from appshelf.core.config.catalog_loader import load_catalog
from appshelf.core.config.session import SessionConfig
from appshelf.core.engine.report import OperationReport
from appshelf.core.models.catalog import Catalog
from appshelf.core.models.state import StateDocument
from appshelf.core.persistence.audit import AuditEntry, AuditWriter
from appshelf.core.persistence.state_file import load_state, save_state

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Loaded catalog + state + backend for a single process."""

    config: SessionConfig
    catalog: Catalog
    state: StateDocument
    backend: PackageBackend
    audit: AuditWriter

    def persist(self) -> None:
        """Write state to disk, refreshing last_run_at and version."""
        save_state(self.state, self.config.state_path, version=self.config.version)

    def record(self, report: OperationReport, **context: object) -> None:
        """Append one audit entry summarizing ``report``."""
        self.audit.write(
            AuditEntry(
                operation_type=report.operation,
                packages=[o.package_id for o in report.outcomes],
                status=report.status,
                succeeded=report.succeeded,
                failed=report.failed,
                skipped=report.skipped,
                errors=report.errors(),
                context={k: v for k, v in context.items() if v is not None},
            )
        )


def open_session(config: SessionConfig, backend: PackageBackend) -> Session:
    """Load catalog and state for a new session.

    Raises:
        CatalogError: The catalog is missing or invalid.
        StateCorruptError: The state file exists but cannot be parsed.
    """
    catalog = load_catalog(config.catalog_path)
    state = load_state(config.state_path, version=config.version)
    logger.info(
        "Session opened: %d managed apps, backend=%s, state=%s",
        len(state.managed_apps),
        backend.name,
        config.state_path,
    )
    return Session(
        config=config,
        catalog=catalog,
        state=state,
        backend=backend,
        audit=AuditWriter(config.audit_path),
    )
