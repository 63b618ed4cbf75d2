"""
Error taxonomy — every exception the core raises on purpose.

Per-package backend failures are NOT exceptions: they travel as
BackendResult values. Only conditions that end the session (or abort a
single user action) are raised.
"""

from __future__ import annotations

from pathlib import Path


class AppshelfError(Exception):
    """Base class for all appshelf errors."""


class CatalogError(AppshelfError):
    """Raised when the catalog is missing or invalid."""


class StateCorruptError(AppshelfError):
    """Raised when a state file exists but cannot be parsed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"State file {path} is corrupt: {reason}")


class StateWriteError(AppshelfError):
    """Raised when the state file cannot be written."""


class BackendUnavailableError(AppshelfError):
    """Raised when the package backend process cannot be started at all."""


class SelectionError(AppshelfError):
    """Raised for malformed id-selection input such as ``1,,x-3``."""


class NotManagedError(AppshelfError):
    """Raised when an operation targets a package that is not managed."""
