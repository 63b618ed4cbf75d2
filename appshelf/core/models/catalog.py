"""
Catalog models — the curated list of installable applications.

The catalog is read-only. The core only needs ``package_id → name``
resolution from it; the CLI also uses local ids, categories and
bundles for browsing.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CatalogEntry(BaseModel):
    """One installable application."""

    model_config = ConfigDict(populate_by_name=True)

    local_id: int = Field(alias="id", gt=0)          # number shown in menus
    package_id: str = Field(min_length=1)            # backend identifier
    display_name: str = Field(alias="name", min_length=1)
    category: str = "Other"


class Bundle(BaseModel):
    """A named group of apps installed together."""

    name: str
    description: str = ""
    apps: list[str] = Field(default_factory=list)


class Catalog(BaseModel):
    """Ordered app list plus named bundles."""

    apps: list[CatalogEntry] = Field(default_factory=list)
    bundles: dict[str, Bundle] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_consistency(self) -> Catalog:
        seen_local: set[int] = set()
        seen_pkg: set[str] = set()
        for entry in self.apps:
            if entry.local_id in seen_local:
                raise ValueError(f"duplicate app id {entry.local_id}")
            if entry.package_id in seen_pkg:
                raise ValueError(f"duplicate package id {entry.package_id}")
            seen_local.add(entry.local_id)
            seen_pkg.add(entry.package_id)

        for bundle in self.bundles.values():
            missing = [pid for pid in bundle.apps if pid not in seen_pkg]
            if missing:
                raise ValueError(
                    f"bundle '{bundle.name}' references unknown apps: {', '.join(missing)}"
                )
        return self

    def get(self, package_id: str) -> CatalogEntry | None:
        for entry in self.apps:
            if entry.package_id == package_id:
                return entry
        return None

    def by_local_id(self, local_id: int) -> CatalogEntry | None:
        for entry in self.apps:
            if entry.local_id == local_id:
                return entry
        return None

    def display_name(self, package_id: str) -> str:
        """Human name for a package id, or the id itself if unknown."""
        entry = self.get(package_id)
        return entry.display_name if entry else package_id

    def categories(self) -> list[str]:
        """Category names in first-seen order."""
        out: list[str] = []
        for entry in self.apps:
            if entry.category not in out:
                out.append(entry.category)
        return out

    def in_category(self, category: str) -> list[CatalogEntry]:
        wanted = category.casefold()
        return [e for e in self.apps if e.category.casefold() == wanted]

    def bundle(self, name: str) -> Bundle | None:
        """Look up a bundle by name (case-insensitive)."""
        if name in self.bundles:
            return self.bundles[name]
        wanted = name.casefold()
        for key, bundle in self.bundles.items():
            if key.casefold() == wanted:
                return bundle
        return None
