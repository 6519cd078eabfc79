"""Domain port definitions for adapters."""

from __future__ import annotations

from .blob_store import BlobStore
from .catalog import CatalogUpload, CatalogWriteResult, RemoteCatalog
from .record_store import CREATED_AT, NEWEST_FIRST, UPDATED_AT, OrderSpec, RawRecord, RecordStore

__all__ = [
    "CREATED_AT",
    "NEWEST_FIRST",
    "UPDATED_AT",
    "BlobStore",
    "CatalogUpload",
    "CatalogWriteResult",
    "OrderSpec",
    "RawRecord",
    "RecordStore",
    "RemoteCatalog",
]
