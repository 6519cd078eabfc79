"""Reconciliation of record-store and remote-catalog listings.

The engine reads one collection from both backends at the same time, normalizes
the records, merges duplicates and returns one list ordered newest first.

Merge precedence:

- record-store entries are admitted first and always survive;
- a catalog entry is dropped when its identity key is already taken, or when
  its locator or external file id matches a record-store entry;
- catalog entries collide with each other only on identity key.

Either upstream failing degrades to zero records from that side. Only errors
outside the store/catalog failure families propagate.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pmdadmin.domain.errors import CatalogError, RecordStoreError, UnsupportedQueryError
from pmdadmin.domain.model import SourceKind
from pmdadmin.domain.ports.record_store import NEWEST_FIRST

from .identity import identity_key, match_keys
from .normalize import normalize_records

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from datetime import datetime

    from pmdadmin.domain.model import CatalogEntry
    from pmdadmin.domain.ports import RawRecord, RecordStore, RemoteCatalog

    from .identity import MatchKey

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CatalogReconciler:
    """Merge one record-store collection with one remote catalog deployment."""

    record_store: RecordStore
    catalog: RemoteCatalog
    collection: str
    name: str = "catalog"

    def __call__(self) -> list[CatalogEntry]:
        return asyncio.run(self.fetch_all())

    async def fetch_all(self) -> list[CatalogEntry]:
        store_records, catalog_records = await asyncio.gather(
            self._fetch_store(),
            self._fetch_catalog(),
        )
        store_entries = normalize_records(store_records, SourceKind.STORE)
        catalog_entries = normalize_records(catalog_records, SourceKind.CATALOG)
        merged = merge_entries(store_entries, catalog_entries)
        log.info(
            "Reconciled %s: store=%s, catalog=%s, merged=%s",
            self.name,
            len(store_entries),
            len(catalog_entries),
            len(merged),
        )
        return sort_newest_first(merged)

    async def _fetch_store(self) -> Sequence[RawRecord]:
        try:
            return await asyncio.to_thread(self._query_store)
        except (RecordStoreError, OSError) as exc:
            log.warning(
                "Record store unavailable for %s, continuing without it: %s", self.name, exc
            )
            return []

    def _query_store(self) -> Sequence[RawRecord]:
        try:
            return self.record_store.query(self.collection, order=NEWEST_FIRST)
        except UnsupportedQueryError:
            log.warning("Ordered query unsupported for %s, sorting client-side", self.collection)
            return self.record_store.query(self.collection)

    async def _fetch_catalog(self) -> Sequence[Mapping[str, object]]:
        try:
            return await self.catalog.fetch_records()
        except (CatalogError, OSError) as exc:
            log.warning(
                "Remote catalog unavailable for %s, continuing without it: %s", self.name, exc
            )
            return []


def merge_entries(
    store_entries: Iterable[CatalogEntry],
    catalog_entries: Iterable[CatalogEntry],
) -> list[CatalogEntry]:
    """Merge both sides by identity key; record-store entries win every conflict."""

    merged: dict[str, CatalogEntry] = {}
    claimed_by_store: dict[MatchKey, str] = {}

    for entry in store_entries:
        key = identity_key(entry, SourceKind.STORE)
        if key in merged:
            log.debug("Duplicate store entry %s ignored", key)
            continue
        merged[key] = entry.with_identity(key)
        for match_key in match_keys(entry):
            claimed_by_store.setdefault(match_key, key)

    for entry in catalog_entries:
        key = identity_key(entry, SourceKind.CATALOG)
        if key in merged:
            log.debug("Catalog entry %s shadowed by existing entry", key)
            continue
        winner = next(
            (claimed_by_store[mk] for mk in match_keys(entry) if mk in claimed_by_store),
            None,
        )
        if winner is not None:
            log.debug("Catalog entry %s shadowed by store entry %s", key, winner)
            continue
        merged[key] = entry.with_identity(key)

    return list(merged.values())


def sort_newest_first(entries: Iterable[CatalogEntry]) -> list[CatalogEntry]:
    """Order by ``created_at`` descending; undated entries keep fetch order at the end."""

    dated: list[tuple[datetime, CatalogEntry]] = []
    undated: list[CatalogEntry] = []
    for entry in entries:
        if entry.created_at is None:
            undated.append(entry)
        else:
            dated.append((entry.created_at, entry))
    # list.sort is stable, reverse=True included
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [entry for _, entry in dated] + undated
