"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, select, update

from pmdadmin.adapters.sqlalchemy.mappings import record_table

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime

    from sqlalchemy import RowMapping
    from sqlalchemy.orm import Session


class SqlAlchemyRecordRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_all(
        self, collection: str, *, newest_first: bool | None = None
    ) -> Sequence[RowMapping]:
        stmt = select(record_table).where(record_table.c.collection == collection)
        if newest_first is True:
            stmt = stmt.order_by(record_table.c.created_at.desc(), record_table.c.id)
        elif newest_first is False:
            stmt = stmt.order_by(record_table.c.created_at.asc(), record_table.c.id)
        return self.session.execute(stmt).mappings().all()

    def get(self, collection: str, record_id: str) -> RowMapping | None:
        stmt = select(record_table).where(
            record_table.c.collection == collection,
            record_table.c.id == record_id,
        )
        return self.session.execute(stmt).mappings().one_or_none()

    def add(
        self,
        collection: str,
        record_id: str,
        data: Mapping[str, object],
        created_at: datetime,
    ) -> None:
        self.session.execute(
            record_table.insert().values(
                collection=collection,
                id=record_id,
                data=dict(data),
                created_at=created_at,
            )
        )

    def replace_data(
        self,
        collection: str,
        record_id: str,
        data: Mapping[str, object],
        updated_at: datetime,
    ) -> bool:
        stmt = (
            update(record_table)
            .where(record_table.c.collection == collection, record_table.c.id == record_id)
            .values(data=dict(data), updated_at=updated_at)
        )
        return self.session.execute(stmt).rowcount > 0

    def remove(self, collection: str, record_id: str) -> None:
        self.session.execute(
            delete(record_table).where(
                record_table.c.collection == collection,
                record_table.c.id == record_id,
            )
        )
