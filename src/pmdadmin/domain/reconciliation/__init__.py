"""Document and gallery reconciliation across the record store and remote catalog.

Flow:
1) fetch both sources concurrently, each degrading to empty on failure
2) normalize raw records onto ``CatalogEntry`` (``normalize``)
3) key entries by identity and merge with store precedence (``identity``, ``engine``)
4) order newest first
"""

from __future__ import annotations

from .engine import CatalogReconciler, merge_entries, sort_newest_first
from .identity import classify_host, identity_key, match_keys
from .normalize import FIELD_ALIASES, normalize_record, normalize_records, parse_timestamp

__all__ = [
    "FIELD_ALIASES",
    "CatalogReconciler",
    "classify_host",
    "identity_key",
    "match_keys",
    "merge_entries",
    "normalize_record",
    "normalize_records",
    "parse_timestamp",
    "sort_newest_first",
]
