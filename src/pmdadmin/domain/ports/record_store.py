"""Port for the document-style record store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

type RawRecord = dict[str, object]

CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"


@dataclass(frozen=True, slots=True)
class OrderSpec:
    """Ordering request for a query; ``field`` is a record field name."""

    field: str
    descending: bool = False


NEWEST_FIRST = OrderSpec(CREATED_AT, descending=True)


@runtime_checkable
class RecordStore(Protocol):
    """Generic CRUD over named collections of loosely typed records.

    Returned records always carry their key under ``"id"`` and the store-managed
    ``createdAt`` / ``updatedAt`` timestamps when known.
    """

    def query(
        self,
        collection: str,
        filters: Mapping[str, object] | None = None,
        order: OrderSpec | None = None,
    ) -> Sequence[RawRecord]: ...

    def get_by_id(self, collection: str, record_id: str) -> RawRecord | None: ...

    def create(
        self,
        collection: str,
        data: Mapping[str, object],
        *,
        record_id: str | None = None,
    ) -> str: ...

    def update(self, collection: str, record_id: str, data: Mapping[str, object]) -> None: ...

    def delete(self, collection: str, record_id: str) -> None: ...
