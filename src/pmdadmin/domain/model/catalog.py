"""Canonical document / gallery entry produced by reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import SourceKind

UNTITLED = "Untitled"


@dataclass(frozen=True, slots=True, kw_only=True)
class CatalogEntry:
    """One document or gallery image after normalization.

    Entries are a read-time projection: they are rebuilt on every fetch and never
    persisted. ``identity`` is filled in by the reconciliation engine.
    """

    title: str
    locator: str
    source: SourceKind
    record_id: str | None = None
    category: str | None = None
    description: str | None = None
    uploaded_by: str | None = None
    source_file_id: str | None = None
    file_type: str | None = None
    created_at: datetime | None = None
    identity: str | None = None

    def with_identity(self, identity: str) -> CatalogEntry:
        return replace(self, identity=identity)
