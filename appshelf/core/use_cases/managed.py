"""
Managed-apps use case — list the managed set and toggle pins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from appshelf.core.persistence.audit import AuditEntry
from appshelf.core.persistence.state_file import NOT_FOUND, find_index
from appshelf.core.session import Session
from appshelf.errors import NotManagedError

logger = logging.getLogger(__name__)


@dataclass
class ManagedRow:
    package_id: str
    display_name: str
    pinned: bool
    last_status: str
    in_catalog: bool

    def to_dict(self) -> dict:
        return {
            "package_id": self.package_id,
            "display_name": self.display_name,
            "pinned": self.pinned,
            "last_status": self.last_status,
            "in_catalog": self.in_catalog,
        }


@dataclass
class ManagedList:
    rows: list[ManagedRow] = field(default_factory=list)
    created_at: str = ""
    last_run_at: str = ""

    def to_dict(self) -> dict:
        return {
            "created_at": self.created_at,
            "last_run_at": self.last_run_at,
            "count": len(self.rows),
            "managed": [r.to_dict() for r in self.rows],
        }


def list_managed(session: Session) -> ManagedList:
    """Managed entries in registration order, with catalog names."""
    catalog = session.catalog
    return ManagedList(
        rows=[
            ManagedRow(
                package_id=e.package_id,
                display_name=catalog.display_name(e.package_id),
                pinned=e.pinned,
                last_status=e.last_status,
                in_catalog=catalog.get(e.package_id) is not None,
            )
            for e in session.state.managed_apps
        ],
        created_at=session.state.created_at,
        last_run_at=session.state.last_run_at,
    )


def set_pinned(session: Session, package_id: str, pinned: bool) -> bool:
    """Pin or unpin a managed app and persist.

    Returns:
        True if the pin state changed.

    Raises:
        NotManagedError: The package is not in the managed set.
    """
    idx = find_index(session.state, package_id)
    if idx == NOT_FOUND:
        raise NotManagedError(f"{package_id} is not managed by appshelf")

    entry = session.state.managed_apps[idx]
    if entry.pinned == pinned:
        return False

    entry.pinned = pinned
    session.persist()
    session.audit.write(
        AuditEntry(
            operation_type="pin" if pinned else "unpin",
            packages=[package_id],
            status="ok",
            succeeded=1,
        )
    )
    logger.info("%s %s", "Pinned" if pinned else "Unpinned", package_id)
    return True
