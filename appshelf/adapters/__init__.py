"""Adapters — bindings to the external package manager.

Public re-exports for convenient access.
"""

from __future__ import annotations

from appshelf.adapters.base import PackageBackend
from appshelf.adapters.mock import MockBackend
from appshelf.adapters.winget import WingetBackend
from appshelf.core.config.session import SessionConfig


def create_backend(config: SessionConfig) -> PackageBackend:
    """Build the backend the session should use."""
    if config.mock:
        return MockBackend()
    return WingetBackend(timeout=config.backend_timeout)


__all__ = [
    "MockBackend",
    "PackageBackend",
    "WingetBackend",
    "create_backend",
]
