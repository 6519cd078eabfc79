"""Record store port implemented on the SQLAlchemy unit of work."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from pmdadmin.domain.errors import RecordNotFoundError, RecordStoreError
from pmdadmin.domain.ports import CREATED_AT, UPDATED_AT, RecordStore

from .unit_of_work import SqlAlchemyUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import RowMapping

    from pmdadmin.domain.ports import OrderSpec, RawRecord

log = logging.getLogger(__name__)

_MANAGED_FIELDS = frozenset({"id", CREATED_AT, UPDATED_AT})


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_record_id() -> str:
    return uuid.uuid4().hex


@dataclass(slots=True)
class SqlAlchemyRecordStore:
    """Collections of JSON records in a single SQL table.

    Ordering on ``createdAt`` runs in SQL; equality filters and ordering on any
    other field are applied to the loaded rows.
    """

    uow_factory: Callable[[], SqlAlchemyUnitOfWork] = field(default=SqlAlchemyUnitOfWork)
    clock: Callable[[], datetime] = field(default=_utc_now)
    id_factory: Callable[[], str] = field(default=_new_record_id)

    def query(
        self,
        collection: str,
        filters: Mapping[str, object] | None = None,
        order: OrderSpec | None = None,
    ) -> Sequence[RawRecord]:
        newest_first: bool | None = None
        if order is not None and order.field == CREATED_AT:
            newest_first = order.descending
        try:
            with self.uow_factory() as uow:
                rows = uow.records.find_all(collection, newest_first=newest_first)
                records = [_to_record(row) for row in rows]
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Query on {collection!r} failed: {exc}") from exc

        if filters:
            records = [
                record
                for record in records
                if all(record.get(key) == value for key, value in filters.items())
            ]
        if order is not None and newest_first is None:
            records = _sorted_by(records, order)
        return records

    def get_by_id(self, collection: str, record_id: str) -> RawRecord | None:
        try:
            with self.uow_factory() as uow:
                row = uow.records.get(collection, record_id)
                return _to_record(row) if row is not None else None
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Lookup of {record_id!r} failed: {exc}") from exc

    def create(
        self,
        collection: str,
        data: Mapping[str, object],
        *,
        record_id: str | None = None,
    ) -> str:
        new_id = record_id or self.id_factory()
        try:
            with self.uow_factory() as uow:
                uow.records.add(collection, new_id, _payload(data), self.clock())
                uow.commit()
        except IntegrityError as exc:
            raise RecordStoreError(f"Record {new_id!r} already exists in {collection!r}") from exc
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Create in {collection!r} failed: {exc}") from exc
        log.debug("Created %s/%s", collection, new_id)
        return new_id

    def update(self, collection: str, record_id: str, data: Mapping[str, object]) -> None:
        try:
            with self.uow_factory() as uow:
                row = uow.records.get(collection, record_id)
                if row is None:
                    raise RecordNotFoundError(collection, record_id)
                merged = {**row["data"], **_payload(data)}
                uow.records.replace_data(collection, record_id, merged, self.clock())
                uow.commit()
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Update of {record_id!r} failed: {exc}") from exc

    def delete(self, collection: str, record_id: str) -> None:
        try:
            with self.uow_factory() as uow:
                uow.records.remove(collection, record_id)
                uow.commit()
        except SQLAlchemyError as exc:
            raise RecordStoreError(f"Delete of {record_id!r} failed: {exc}") from exc
        log.debug("Deleted %s/%s", collection, record_id)


def _payload(data: Mapping[str, object]) -> dict[str, object]:
    return {key: value for key, value in data.items() if key not in _MANAGED_FIELDS}


def _to_record(row: RowMapping) -> RawRecord:
    record: RawRecord = dict(row["data"])
    record["id"] = row["id"]
    record[CREATED_AT] = row["created_at"]
    if row["updated_at"] is not None:
        record[UPDATED_AT] = row["updated_at"]
    return record


def _sort_key(value: object) -> tuple[int, float, str]:
    if isinstance(value, bool):
        return (0, float(value), "")
    if isinstance(value, int | float):
        return (0, float(value), "")
    if isinstance(value, datetime):
        return (0, value.timestamp(), "")
    return (1, 0.0, str(value).casefold())


def _sorted_by(records: list[RawRecord], order: OrderSpec) -> list[RawRecord]:
    present = [record for record in records if record.get(order.field) is not None]
    missing = [record for record in records if record.get(order.field) is None]
    present.sort(key=lambda record: _sort_key(record.get(order.field)), reverse=order.descending)
    return present + missing


if TYPE_CHECKING:
    _store_check: RecordStore = SqlAlchemyRecordStore()
