"""Identity keys for catalog entries.

An entry's identity is the most specific stable handle available, in order:
record-store id, external file id, locator, and finally a random title key.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Final
from uuid import uuid4

from pmdadmin.domain.model import HostKind, SourceKind

if TYPE_CHECKING:
    from pmdadmin.domain.model import CatalogEntry

type MatchKey = tuple[str, str]

_HOST_MARKERS: Final[tuple[tuple[HostKind, tuple[str, ...]], ...]] = (
    (HostKind.FIREBASE, ("storage.googleapis.com", "firebasestorage.app")),
    (HostKind.GDRIVE, ("drive.google.com", "googleusercontent.com")),
)


def _random_suffix() -> str:
    return uuid4().hex


def classify_host(locator: str) -> HostKind:
    for kind, markers in _HOST_MARKERS:
        if any(marker in locator for marker in markers):
            return kind
    return HostKind.UNKNOWN


def identity_key(
    entry: CatalogEntry,
    source: SourceKind,
    *,
    suffix: Callable[[], str] = _random_suffix,
) -> str:
    if source is SourceKind.STORE and entry.record_id:
        return f"store_{entry.record_id}"
    if entry.source_file_id:
        prefix = "store" if source is SourceKind.STORE else "catalog"
        return f"{prefix}_{entry.source_file_id}"
    if entry.locator:
        return f"{classify_host(entry.locator)}_{entry.locator}"
    # never collides, so such entries are never merged
    return f"{source}_{entry.title}_{suffix()}"


def match_keys(entry: CatalogEntry) -> tuple[MatchKey, ...]:
    """Source-independent keys that mark two entries as the same resource."""

    keys: list[MatchKey] = []
    if entry.locator:
        keys.append(("locator", entry.locator))
    if entry.source_file_id:
        keys.append(("file", entry.source_file_id))
    return tuple(keys)
