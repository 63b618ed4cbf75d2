"""
Backend base — the protocol contract between the engine and the package manager.

This defines the abstract interface every package backend implements.
The engine only talks to the backend through this protocol, never
directly to winget.

Calls are synchronous and blocking. They return BackendResult values
and do not raise for a failed install or upgrade. The single exception
is a hard fault — the backend process cannot be started at all — which
raises BackendUnavailableError and ends the run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from appshelf.core.models.result import BackendResult


class PackageBackend(ABC):
    """Abstract base class for package backends.

    To create a new backend:
        1. Subclass PackageBackend
        2. Implement name, is_available, install, upgrade
        3. Return it from appshelf.adapters.create_backend
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The backend identifier (e.g., 'winget', 'mock')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the underlying tool is installed.

        Should be fast and never raise.
        """

    def version(self) -> str | None:
        """Backend version string, if it can be determined."""
        return None

    @abstractmethod
    def install(self, package_id: str) -> BackendResult:
        """Install a package by id."""

    @abstractmethod
    def upgrade(self, package_id: str, *, check: bool = False) -> BackendResult:
        """Upgrade a package by id.

        Args:
            package_id: Backend package identifier.
            check: If True, only report whether an upgrade is available
                (dry check). If False, apply the upgrade.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
