"""
Domain models — Pydantic types for appshelf.

All models are re-exported here for convenient access:

    from appshelf.core.models import Catalog, ManagedAppEntry, StateDocument
"""

from appshelf.core.models.catalog import Bundle, Catalog, CatalogEntry
from appshelf.core.models.result import BackendResult
from appshelf.core.models.state import AppStatus, ManagedAppEntry, StateDocument

__all__ = [
    "AppStatus",
    # result.py
    "BackendResult",
    # catalog.py
    "Bundle",
    "Catalog",
    "CatalogEntry",
    # state.py
    "ManagedAppEntry",
    "StateDocument",
]
