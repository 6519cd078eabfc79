"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from pmdadmin.adapters.apps_script import AppsScriptCatalog
from pmdadmin.adapters.gcs import GcsBlobStore
from pmdadmin.adapters.sqlalchemy import SqlAlchemyRecordStore, is_started, startup
from pmdadmin.config import (
    get_blob_store_config,
    get_documents_catalog_config,
    get_gallery_catalog_config,
    with_listing_cache,
)
from pmdadmin.domain.directory import DirectoryService, EmployeeStats
from pmdadmin.domain.errors import ValidationError
from pmdadmin.domain.ranks import RankService, requires_secondary_id, validate_secondary_id
from pmdadmin.domain.reconciliation import CatalogReconciler
from pmdadmin.domain.uploads import (
    DEFAULT_UPLOADER,
    BlobUploader,
    CatalogUploader,
    StoredUpload,
    UploadKind,
    UploadRequest,
    delete_catalog_entry,
)

if TYPE_CHECKING:
    from pmdadmin.config import CatalogConfig
    from pmdadmin.domain.model import CatalogEntry, RankDefinition
    from pmdadmin.domain.ports import BlobStore, CatalogWriteResult, RecordStore, RemoteCatalog

log = getLogger(__name__)


def default_record_store() -> RecordStore:
    if not is_started():
        startup()
    return SqlAlchemyRecordStore()


def catalog_config(kind: UploadKind, *, cache_ttl: float | None = None) -> CatalogConfig:
    if kind is UploadKind.DOCUMENT:
        config = get_documents_catalog_config()
    else:
        config = get_gallery_catalog_config()
    if cache_ttl:
        config = with_listing_cache(config, cache_ttl)
    return config


def build_catalog(kind: UploadKind, *, cache_ttl: float | None = None) -> RemoteCatalog:
    return AppsScriptCatalog(catalog_config(kind, cache_ttl=cache_ttl))


def list_entries(
    kind: UploadKind,
    *,
    record_store: RecordStore | None = None,
    catalog: RemoteCatalog | None = None,
    cache_ttl: float | None = None,
) -> list[CatalogEntry]:
    """Merged, newest-first listing of documents or gallery images."""

    reconciler = CatalogReconciler(
        record_store=record_store or default_record_store(),
        catalog=catalog or build_catalog(kind, cache_ttl=cache_ttl),
        collection=kind.collection,
        name=kind.prefix,
    )
    return reconciler()


def fetch_documents(
    *,
    record_store: RecordStore | None = None,
    catalog: RemoteCatalog | None = None,
) -> list[CatalogEntry]:
    return list_entries(UploadKind.DOCUMENT, record_store=record_store, catalog=catalog)


def fetch_gallery_images(
    *,
    record_store: RecordStore | None = None,
    catalog: RemoteCatalog | None = None,
) -> list[CatalogEntry]:
    return list_entries(UploadKind.IMAGE, record_store=record_store, catalog=catalog)


def upload_to_storage(
    kind: UploadKind,
    request: UploadRequest,
    *,
    record_store: RecordStore | None = None,
    blob_store: BlobStore | None = None,
) -> StoredUpload:
    uploader = BlobUploader(
        record_store=record_store or default_record_store(),
        blob_store=blob_store or GcsBlobStore(get_blob_store_config()),
    )
    stored = asyncio.run(uploader.upload(kind, request))
    log.info(f"Uploaded {request.title!r} to {stored.url}")
    return stored


def upload_to_catalog(
    kind: UploadKind,
    request: UploadRequest,
    *,
    catalog: RemoteCatalog | None = None,
) -> CatalogWriteResult:
    uploader = CatalogUploader(catalog or build_catalog(kind))
    return asyncio.run(uploader.upload(kind, request))


def register_catalog_url(
    kind: UploadKind,
    title: str,
    url: str,
    *,
    category: str = "",
    description: str = "",
    uploaded_by: str | None = None,
    catalog: RemoteCatalog | None = None,
) -> CatalogWriteResult:
    uploader = CatalogUploader(catalog or build_catalog(kind))
    return asyncio.run(
        uploader.register_url(
            title,
            url,
            category=category,
            description=description,
            uploaded_by=uploaded_by or DEFAULT_UPLOADER,
        )
    )


def delete_entry(
    kind: UploadKind,
    key: str,
    *,
    uploaded_by: str | None = None,
    record_store: RecordStore | None = None,
    catalog: RemoteCatalog | None = None,
) -> CatalogEntry:
    """Delete the entry whose identity key, record id or title equals ``key``."""

    store = record_store or default_record_store()
    remote = catalog or build_catalog(kind)
    entries = list_entries(kind, record_store=store, catalog=remote)
    entry = _find_entry(entries, key)
    if entry is None:
        raise ValidationError(f"No {kind.prefix} entry matches {key!r}")
    asyncio.run(
        delete_catalog_entry(remote, store, kind.collection, entry, uploaded_by=uploaded_by)
    )
    return entry


def _find_entry(entries: list[CatalogEntry], key: str) -> CatalogEntry | None:
    for entry in entries:
        if key in {entry.identity, entry.record_id}:
            return entry
    return next((entry for entry in entries if entry.title == key), None)


def list_ranks(*, record_store: RecordStore | None = None) -> list[RankDefinition]:
    return RankService(record_store or default_record_store()).list_ranks()


def check_secondary_id(
    rank_label: str,
    secondary_id: str | None,
    *,
    record_store: RecordStore | None = None,
) -> bool:
    """Raise when ``rank_label`` needs a metal number that is missing.

    Returns whether the rank requires one at all.
    """

    ranks = list_ranks(record_store=record_store)
    validate_secondary_id(ranks, rank_label, secondary_id)
    return requires_secondary_id(ranks, rank_label)


def employee_stats(*, record_store: RecordStore | None = None) -> EmployeeStats:
    store = record_store or default_record_store()
    return DirectoryService(store, RankService(store)).employee_stats()
