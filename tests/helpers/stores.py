"""In-memory fakes for the record store, remote catalog and blob store ports."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import TYPE_CHECKING

from pmdadmin.domain.errors import RecordNotFoundError, RecordStoreError, UnsupportedQueryError
from pmdadmin.domain.ports import (
    CREATED_AT,
    UPDATED_AT,
    BlobStore,
    CatalogUpload,
    CatalogWriteResult,
    RecordStore,
    RemoteCatalog,
)

if TYPE_CHECKING:
    from pmdadmin.domain.ports import OrderSpec, RawRecord

_EPOCH = datetime(2025, 1, 1, tzinfo=UTC)


@dataclass
class FakeRecordStore:
    """Dict-backed record store.

    ``fail_with`` makes every call raise; ``ordered_queries`` toggles whether
    ordered queries are supported.
    """

    collections: dict[str, dict[str, RawRecord]] = field(default_factory=dict)
    fail_with: Exception | None = None
    ordered_queries: bool = True
    calls: list[tuple[str, str]] = field(default_factory=list)
    _ids: count[int] = field(default_factory=lambda: count(1))

    def seed(self, collection: str, *records: Mapping[str, object]) -> None:
        bucket = self.collections.setdefault(collection, {})
        for record in records:
            record_id = str(record.get("id") or f"seed{next(self._ids)}")
            bucket[record_id] = {**record, "id": record_id}

    def query(
        self,
        collection: str,
        filters: Mapping[str, object] | None = None,
        order: OrderSpec | None = None,
    ) -> Sequence[RawRecord]:
        self._check("query", collection)
        if order is not None and not self.ordered_queries:
            raise UnsupportedQueryError(f"cannot order {collection}")
        records = [dict(r) for r in self.collections.get(collection, {}).values()]
        if filters:
            records = [r for r in records if all(r.get(k) == v for k, v in filters.items())]
        if order is not None:
            present = [r for r in records if r.get(order.field) is not None]
            missing = [r for r in records if r.get(order.field) is None]
            present.sort(key=lambda r: r[order.field], reverse=order.descending)  # type: ignore[arg-type, return-value]
            records = present + missing
        return records

    def get_by_id(self, collection: str, record_id: str) -> RawRecord | None:
        self._check("get", collection)
        record = self.collections.get(collection, {}).get(record_id)
        return dict(record) if record is not None else None

    def create(
        self,
        collection: str,
        data: Mapping[str, object],
        *,
        record_id: str | None = None,
    ) -> str:
        self._check("create", collection)
        new_id = record_id or f"rec{next(self._ids)}"
        bucket = self.collections.setdefault(collection, {})
        if new_id in bucket:
            raise RecordStoreError(f"{new_id} exists")
        created = _EPOCH + timedelta(minutes=len(bucket))
        bucket[new_id] = {**data, "id": new_id, CREATED_AT: created}
        return new_id

    def update(self, collection: str, record_id: str, data: Mapping[str, object]) -> None:
        self._check("update", collection)
        bucket = self.collections.get(collection, {})
        if record_id not in bucket:
            raise RecordNotFoundError(collection, record_id)
        bucket[record_id] = {**bucket[record_id], **data, UPDATED_AT: _EPOCH}

    def delete(self, collection: str, record_id: str) -> None:
        self._check("delete", collection)
        self.collections.get(collection, {}).pop(record_id, None)

    def records(self, collection: str) -> list[RawRecord]:
        return list(self.collections.get(collection, {}).values())

    def _check(self, operation: str, collection: str) -> None:
        self.calls.append((operation, collection))
        if self.fail_with is not None:
            raise self.fail_with


@dataclass
class FakeCatalog:
    records: list[Mapping[str, object]] = field(default_factory=list)
    fail_with: Exception | None = None
    write_result: CatalogWriteResult = field(
        default_factory=lambda: CatalogWriteResult(success=True, message="ok")
    )
    uploads: list[CatalogUpload] = field(default_factory=list)
    deletes: list[tuple[str, str | None, str | None]] = field(default_factory=list)

    async def fetch_records(self) -> Sequence[Mapping[str, object]]:
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.records)

    async def upload(self, upload: CatalogUpload) -> CatalogWriteResult:
        self.uploads.append(upload)
        return self.write_result

    async def delete(
        self,
        title: str,
        *,
        file_id: str | None = None,
        uploaded_by: str | None = None,
    ) -> CatalogWriteResult:
        self.deletes.append((title, file_id, uploaded_by))
        return self.write_result


@dataclass
class FakeBlobStore:
    base_url: str = "https://storage.googleapis.com/test-bucket"
    objects: dict[str, tuple[bytes, str]] = field(default_factory=dict)
    fail_with: Exception | None = None

    async def put_object(self, path: str, data: bytes, content_type: str) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        self.objects[path] = (data, content_type)
        return f"{self.base_url}/{path}"


if TYPE_CHECKING:
    _store_check: RecordStore = FakeRecordStore()
    _catalog_check: RemoteCatalog = FakeCatalog()
    _blob_check: BlobStore = FakeBlobStore()
