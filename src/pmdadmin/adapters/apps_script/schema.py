"""Pydantic models for spreadsheet-script responses."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

LISTING_WRAPPER_KEYS: Final[tuple[str, ...]] = ("data", "documents", "items", "images")


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class AppsScriptBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class WriteResponse(AppsScriptBaseModel):
    """Reply to an ``upload`` or ``delete`` action."""

    success: bool = True
    message: str | None = None
    error: str | None = None
    url: str | None = None
    file_id: str | None = Field(default=None, alias="fileId")

    _normalize_text = field_validator("message", "error", "url", "file_id", mode="before")(
        _blank_to_none
    )

    @property
    def failed(self) -> bool:
        return self.error is not None or not self.success


def unwrap_listing(payload: object) -> list[Mapping[str, object]]:
    """Extract the record list from a listing payload.

    Accepts a bare array or an object wrapping one under a known key. An object
    carrying ``error`` and anything unrecognised yield no records.
    """

    rows: object = None
    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, Mapping):
        mapping = cast(Mapping[str, object], payload)
        if "error" in mapping:
            return []
        rows = next(
            (mapping[key] for key in LISTING_WRAPPER_KEYS if isinstance(mapping.get(key), list)),
            None,
        )
    if not isinstance(rows, list):
        return []
    return [
        cast(Mapping[str, object], row)
        for row in cast(Sequence[object], rows)
        if isinstance(row, Mapping)
    ]
