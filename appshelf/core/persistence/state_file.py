"""
State file persistence — atomic read/write for StateDocument.

State is stored as JSON in .appshelf/state.json. Writes are atomic
(write to temp file, then rename) so a crash mid-write never leaves a
file the next load cannot parse.

A missing file means "first run": a fresh document is created and
written immediately. A file that exists but does not parse is a
StateCorruptError — the managed-app history is never silently dropped.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from appshelf.core.models.state import StateDocument
from appshelf.errors import StateCorruptError, StateWriteError

logger = logging.getLogger(__name__)

NOT_FOUND = -1


def load_state(path: Path, version: str = "") -> StateDocument:
    """Load state from a JSON file, creating it on first run.

    Args:
        path: Path to the state JSON file.
        version: Tool version stamped into a freshly created document.

    Returns:
        Normalized StateDocument.

    Raises:
        StateCorruptError: The file exists but is not a valid state document.
    """
    if not path.exists():
        logger.info("No state file at %s — creating a fresh one", path)
        state = StateDocument(version=version)
        save_state(state, path, version=version)
        return state

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StateCorruptError(path, f"cannot read file: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StateCorruptError(path, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise StateCorruptError(path, f"expected a JSON object, got {type(data).__name__}")

    try:
        state = StateDocument.model_validate(data)
    except ValidationError as e:
        raise StateCorruptError(path, f"unexpected structure: {e}") from e

    normalize_state(state)
    logger.debug(
        "Loaded state from %s (%d managed, last_run_at=%s)",
        path,
        len(state.managed_apps),
        state.last_run_at,
    )
    return state


def normalize_state(state: StateDocument) -> StateDocument:
    """Enforce the managed-set invariants in place.

    ``managed_apps`` is always a list (the model validator coerces
    null/singleton values on load) and holds at most one entry per
    package id. Later duplicates are dropped.
    """
    if state.managed_apps is None:
        state.managed_apps = []

    seen: set[str] = set()
    unique = []
    for entry in state.managed_apps:
        if entry.package_id in seen:
            logger.warning("Dropping duplicate managed entry for %s", entry.package_id)
            continue
        seen.add(entry.package_id)
        unique.append(entry)

    if len(unique) != len(state.managed_apps):
        state.managed_apps = unique
    return state


def save_state(state: StateDocument, path: Path, version: str = "") -> None:
    """Save state to a JSON file (atomic write).

    Refreshes ``last_run_at``, stamps ``version`` and normalizes first.

    Raises:
        StateWriteError: The file could not be written.
    """
    state.touch()
    if version:
        state.version = version
    normalize_state(state)

    content = json.dumps(state.to_json_dict(), indent=2, ensure_ascii=False) + "\n"

    # Atomic write: temp file in same directory, then rename
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=".state_",
            suffix=".tmp",
        )
        tmp = Path(tmp_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp, path)
            logger.debug("State saved to %s", path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
    except OSError as e:
        logger.error("Failed to save state to %s: %s", path, e)
        raise StateWriteError(f"Cannot write state file {path}: {e}") from e


def find_index(state: StateDocument, package_id: str) -> int:
    """Position of the entry for ``package_id``, or NOT_FOUND (-1)."""
    for i, entry in enumerate(state.managed_apps):
        if entry.package_id == package_id:
            return i
    return NOT_FOUND
