"""
Registration — add newly installed apps to the managed set exactly once.

Registration and status refinement are separate steps: an entry first
becomes ``managed`` and only then is marked ``installed``, so "known to
appshelf" and "confirmed installed" stay distinguishable in state.
"""

from __future__ import annotations

import logging

from appshelf.core.models.state import AppStatus, ManagedAppEntry, StateDocument
from appshelf.core.persistence.state_file import NOT_FOUND, find_index

logger = logging.getLogger(__name__)


def ensure_managed(state: StateDocument, package_id: str) -> bool:
    """Append ``package_id`` to the managed set unless already present.

    Returns:
        True if a new entry was added, False if it already existed.
    """
    if find_index(state, package_id) != NOT_FOUND:
        return False

    state.managed_apps.append(
        ManagedAppEntry(
            package_id=package_id,
            pinned=False,
            last_seen_version=None,
            last_status="managed",
        )
    )
    logger.info("Now managing %s", package_id)
    return True


def set_status(state: StateDocument, package_id: str, status: AppStatus) -> bool:
    """Set ``last_status`` on an existing entry.

    Returns:
        False (and changes nothing) if the package is not managed.
    """
    idx = find_index(state, package_id)
    if idx == NOT_FOUND:
        logger.debug("Status %s for unmanaged %s ignored", status, package_id)
        return False
    state.managed_apps[idx].last_status = status
    return True
