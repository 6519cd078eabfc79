"""Rank resolution and the rank master service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pmdadmin.domain.errors import (
    RankValidationError,
    RecordNotFoundError,
    SecondaryIdRequiredError,
)
from pmdadmin.domain.model import Collection, RankDefinition

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from pmdadmin.domain.ports import RecordStore

log = logging.getLogger(__name__)


def find_rank(ranks: Iterable[RankDefinition], label: str) -> RankDefinition | None:
    """Return the first rank whose equivalent code, aliases or id equal ``label``."""

    for rank in ranks:
        if rank.equivalent_code == label or label in rank.aliases or rank.id == label:
            return rank
    return None


def requires_secondary_id(ranks: Iterable[RankDefinition], label: str) -> bool:
    """Whether ``label`` resolves to a rank that mandates a metal number.

    Unknown labels never require one.
    """

    rank = find_rank(ranks, label)
    return rank.requires_secondary_id if rank is not None else False


def validate_secondary_id(
    ranks: Iterable[RankDefinition],
    rank_label: str | None,
    secondary_id: str | None,
) -> None:
    if not rank_label:
        return
    if requires_secondary_id(ranks, rank_label) and not (secondary_id or "").strip():
        raise SecondaryIdRequiredError(rank_label)


def sort_ranks(ranks: Iterable[RankDefinition]) -> list[RankDefinition]:
    """Seniority first (1 = most senior), unordered ranks after, then by label."""

    def key(rank: RankDefinition) -> tuple[int, int, str]:
        if rank.seniority_order is None:
            return (1, 0, rank.label)
        return (0, rank.seniority_order, rank.label)

    return sorted(ranks, key=key)


@dataclass(slots=True)
class RankService:
    """CRUD over the rank master collection; the rank id is the record key."""

    record_store: RecordStore
    collection: str = Collection.RANKS

    def list_ranks(self, *, include_inactive: bool = False) -> list[RankDefinition]:
        ranks = self._load_all()
        if include_inactive:
            return sort_ranks(ranks)
        active = [rank for rank in ranks if rank.active]
        # fall back to every rank when none is active
        return sort_ranks(active or ranks)

    def get_rank(self, rank_id: str) -> RankDefinition | None:
        record = self.record_store.get_by_id(self.collection, rank_id)
        return RankDefinition.from_record(record) if record is not None else None

    def create_rank(self, rank: RankDefinition) -> str:
        if self.record_store.get_by_id(self.collection, rank.id) is not None:
            raise RankValidationError(f"rank {rank.id!r} already exists")
        return self.record_store.create(self.collection, rank.to_record(), record_id=rank.id)

    def update_rank(self, rank_id: str, changes: Mapping[str, object]) -> RankDefinition:
        """Apply ``changes`` (record field names) and re-validate the whole rank."""

        new_id = changes.get("rank_id")
        if new_id is not None and new_id != rank_id:
            raise RankValidationError("rank id cannot be changed after creation")
        current = self.record_store.get_by_id(self.collection, rank_id)
        if current is None:
            raise RecordNotFoundError(self.collection, rank_id)
        updated = RankDefinition.from_record({**current, **changes, "rank_id": rank_id})
        self.record_store.update(self.collection, rank_id, updated.to_record())
        return updated

    def deactivate_rank(self, rank_id: str) -> RankDefinition:
        return self.update_rank(rank_id, {"isActive": False})

    def delete_rank(self, rank_id: str) -> None:
        self.record_store.delete(self.collection, rank_id)

    def requires_secondary_id(self, label: str) -> bool:
        return requires_secondary_id(self.list_ranks(), label)

    def _load_all(self) -> list[RankDefinition]:
        ranks: list[RankDefinition] = []
        for record in self.record_store.query(self.collection):
            try:
                ranks.append(RankDefinition.from_record(record))
            except RankValidationError as exc:
                log.warning("Skipping invalid rank record %s: %s", record.get("id"), exc)
        return ranks

