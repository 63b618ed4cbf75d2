"""
Catalog loader — reads catalog.yml into domain models.

It reads YAML, validates against Pydantic schemas, and returns a
typed Catalog. Any problem is a CatalogError: the session cannot
start without a catalog.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from appshelf.core.models.catalog import Catalog
from appshelf.errors import CatalogError

logger = logging.getLogger(__name__)


def load_catalog(path: Path) -> Catalog:
    """Load and validate the application catalog.

    Args:
        path: Path to catalog.yml.

    Returns:
        Validated Catalog model.

    Raises:
        CatalogError: If the file is missing or invalid.
    """
    if not path.is_file():
        raise CatalogError(f"Catalog file not found: {path}")

    logger.debug("Loading catalog from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Bundles are keyed by name in YAML; the model carries the name too
    bundles = data.get("bundles") or {}
    if not isinstance(bundles, dict):
        raise CatalogError(f"'bundles' in {path} must be a mapping")
    normalized_bundles = {}
    for name, body in bundles.items():
        if isinstance(body, list):
            body = {"apps": body}  # shorthand: bundle: [pkg, pkg]
        elif not isinstance(body, dict):
            raise CatalogError(f"Bundle '{name}' in {path} must be a mapping or a list of package ids")
        body = dict(body)
        body.setdefault("name", str(name))
        normalized_bundles[str(name)] = body

    try:
        catalog = Catalog.model_validate(
            {"apps": data.get("apps") or [], "bundles": normalized_bundles}
        )
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog {path}: {e}") from e

    if not catalog.apps:
        raise CatalogError(f"Catalog {path} lists no apps")

    logger.info(
        "Loaded catalog with %d apps and %d bundles",
        len(catalog.apps),
        len(catalog.bundles),
    )
    return catalog
