"""
Id selection — parse menu input like ``1,3,7-10`` into catalog entries.
"""

from __future__ import annotations

import re

from appshelf.core.models.catalog import Catalog, CatalogEntry
from appshelf.errors import SelectionError

_RANGE_RE = re.compile(r"^(\d+)\s*-\s*(\d+)$")
_SINGLE_RE = re.compile(r"^\d+$")

# Upper bound on a single range, so "1-999999" can't explode
MAX_RANGE_SPAN = 1000


def parse_selection(text: str) -> list[int]:
    """Parse comma-separated ids and inclusive ranges.

    Duplicates are dropped; order of first appearance is kept.

    Raises:
        SelectionError: Empty input, bad tokens, zero ids or reversed ranges.
    """
    if not text or not text.strip():
        raise SelectionError("Empty selection")

    ids: list[int] = []
    for raw_token in text.split(","):
        token = raw_token.strip()
        if not token:
            raise SelectionError(f"Empty item in selection '{text}'")

        match = _RANGE_RE.match(token)
        if match:
            start, end = int(match.group(1)), int(match.group(2))
            if start > end:
                raise SelectionError(f"Reversed range '{token}'")
            if end - start >= MAX_RANGE_SPAN:
                raise SelectionError(f"Range '{token}' is too large")
            numbers = range(start, end + 1)
        elif _SINGLE_RE.match(token):
            numbers = range(int(token), int(token) + 1)
        else:
            raise SelectionError(f"Invalid item '{token}' (use numbers like 1,3,7-10)")

        for n in numbers:
            if n <= 0:
                raise SelectionError(f"Ids start at 1, got {n}")
            if n not in ids:
                ids.append(n)

    return ids


def resolve_selection(text: str, catalog: Catalog) -> list[CatalogEntry]:
    """Parse a selection and map every id onto the catalog.

    Raises:
        SelectionError: Invalid syntax, or ids that are not in the catalog.
    """
    ids = parse_selection(text)
    entries = []
    unknown = []
    for local_id in ids:
        entry = catalog.by_local_id(local_id)
        if entry is None:
            unknown.append(str(local_id))
        else:
            entries.append(entry)

    if unknown:
        raise SelectionError(f"Unknown app id(s): {', '.join(unknown)}")
    return entries
