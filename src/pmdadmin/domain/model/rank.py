"""Personnel rank definitions."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import cast

from pmdadmin.domain.errors import RankValidationError

from .enums import StaffCategory


@dataclass(kw_only=True)
class RankDefinition:
    """A rank as maintained in the rank master collection.

    ``id`` doubles as the record key and never changes after creation.
    Ministerial ranks carry no equivalent code and never require a metal number;
    both are forced here so every construction path honours it.
    """

    id: str
    label: str
    staff_category: StaffCategory = StaffCategory.POLICE
    equivalent_code: str = ""
    seniority_order: int | None = None
    aliases: list[str] = field(default_factory=list[str])
    requires_secondary_id: bool = False
    active: bool = True
    unit_category: str | None = None
    remarks: str | None = None

    def __post_init__(self) -> None:
        self.id = self.id.strip()
        if not self.id:
            raise RankValidationError("rank id is required")
        try:
            self.staff_category = StaffCategory(self.staff_category)
        except ValueError as exc:
            msg = f"rank {self.id!r} has unknown staff category {self.staff_category!r}"
            raise RankValidationError(msg) from exc
        self.aliases = [alias.strip() for alias in self.aliases if alias and alias.strip()]
        if self.remarks == "":
            self.remarks = None
        if self.staff_category is StaffCategory.MINISTERIAL:
            self.equivalent_code = ""
            self.requires_secondary_id = False
        elif not self.equivalent_code.strip():
            raise RankValidationError(f"rank {self.id!r} needs an equivalent code")
        else:
            self.equivalent_code = self.equivalent_code.strip()

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> RankDefinition:
        rank_id = record.get("rank_id") or record.get("id") or ""
        staff = record.get("staffType") or StaffCategory.POLICE
        aliases = record.get("aliases")
        return cls(
            id=str(rank_id),
            label=str(record.get("rank_label") or rank_id),
            staff_category=cast(StaffCategory, str(staff)),
            equivalent_code=str(record.get("equivalent_rank") or ""),
            seniority_order=_seniority(record.get("seniority_order")),
            aliases=[str(alias) for alias in cast(Sequence[object], aliases)]
            if isinstance(aliases, list | tuple)
            else [],
            requires_secondary_id=bool(record.get("requiresMetalNumber", False)),
            active=record.get("isActive") is not False,
            unit_category=_optional_str(record.get("category")),
            remarks=_optional_str(record.get("remarks")),
        )

    def to_record(self) -> dict[str, object]:
        return {
            "rank_id": self.id,
            "rank_label": self.label,
            "staffType": self.staff_category.value,
            "category": self.unit_category,
            "equivalent_rank": self.equivalent_code,
            "seniority_order": self.seniority_order,
            "aliases": list(self.aliases),
            "requiresMetalNumber": self.requires_secondary_id,
            "isActive": self.active,
            "remarks": self.remarks,
        }


def _seniority(value: object) -> int | None:
    # blank form fields are stored as NaN
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
