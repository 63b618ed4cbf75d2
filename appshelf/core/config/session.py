"""
Session configuration — the single source of truth for "where do things live."

Built ONCE at startup by the entry point and passed by reference to
every component that needs a path or a setting:

    - CLI:    main.py → SessionConfig.from_env(...)
    - Tests:  SessionConfig(root=tmp_path, ...)

Precedence for every setting: explicit argument > APPSHELF_* env var > default.
That includes logging: level, log file (default .appshelf/appshelf.log)
and log file level are resolved here, not read by the logging module.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from appshelf import __version__

DEFAULT_STATE_DIR = ".appshelf"
DEFAULT_STATE_FILE = "state.json"
DEFAULT_AUDIT_FILE = "audit.ndjson"
DEFAULT_LOG_FILE = "appshelf.log"

# Bundled catalog, shipped as package data
BUNDLED_CATALOG = Path(__file__).resolve().parent.parent / "data" / "catalog.yml"


@dataclass(frozen=True)
class SessionConfig:
    """Immutable per-process settings."""

    root: Path
    state_dir: Path
    catalog_path: Path
    version: str = __version__
    backend_timeout: float | None = None  # None = wait forever
    mock: bool = False
    log_level: str = "WARNING"
    log_file: Path | None = None  # None = console only
    log_file_level: str = "INFO"

    @property
    def state_path(self) -> Path:
        return self.state_dir / DEFAULT_STATE_FILE

    @property
    def audit_path(self) -> Path:
        return self.state_dir / DEFAULT_AUDIT_FILE

    @classmethod
    def from_env(
        cls,
        root: Path | None = None,
        state_dir: Path | None = None,
        catalog_path: Path | None = None,
        backend_timeout: float | None = None,
        mock: bool = False,
        log_level: str | None = None,
        log_file: Path | None = None,
        log_file_level: str | None = None,
    ) -> SessionConfig:
        """Resolve settings from arguments, then environment, then defaults."""
        root = (root or Path.cwd()).resolve()

        if state_dir is None:
            env_dir = os.environ.get("APPSHELF_STATE_DIR")
            state_dir = Path(env_dir) if env_dir else root / DEFAULT_STATE_DIR

        if catalog_path is None:
            env_catalog = os.environ.get("APPSHELF_CATALOG")
            catalog_path = Path(env_catalog) if env_catalog else BUNDLED_CATALOG

        if backend_timeout is None:
            backend_timeout = _parse_timeout(os.environ.get("APPSHELF_BACKEND_TIMEOUT"))

        log_level = log_level or os.environ.get("APPSHELF_LOG_LEVEL") or "WARNING"
        log_file_level = log_file_level or os.environ.get("APPSHELF_LOG_FILE_LEVEL") or "INFO"

        if log_file is None:
            env_log = os.environ.get("APPSHELF_LOG_FILE")
            if env_log is None:
                log_file = state_dir / DEFAULT_LOG_FILE
            elif env_log:  # APPSHELF_LOG_FILE="" turns the file off
                log_file = Path(env_log)

        return cls(
            root=root,
            state_dir=state_dir,
            catalog_path=catalog_path,
            backend_timeout=backend_timeout,
            mock=mock,
            log_level=log_level,
            log_file=log_file,
            log_file_level=log_file_level,
        )


def _parse_timeout(raw: str | None) -> float | None:
    """Parse a positive timeout in seconds; anything else means no timeout."""
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None
