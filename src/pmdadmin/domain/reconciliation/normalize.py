"""Field normalization for catalog records.

Both backends describe the same documents with different field spellings: the
record store uses camelCase (``title``, ``url``, ``uploadedBy``) while the
spreadsheet script echoes its column headers (``Title``, ``URL``,
``UploadedBy``). Every canonical field is read from an ordered list of
candidate keys; the first usable value wins.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime
from typing import Final

from pmdadmin.domain.model import UNTITLED, CatalogEntry, SourceKind

log = logging.getLogger(__name__)

FIELD_ALIASES: Final[Mapping[str, tuple[str, ...]]] = {
    "title": ("title", "Title", "name", "Name"),
    "locator": ("url", "URL", "imageUrl"),
    "deleted": ("Delete", "delete"),
    "created_at": ("createdAt",),
    "uploaded_date": ("uploadedDate", "UploadedDate"),
    "category": ("category", "Category"),
    "description": ("description", "Description"),
    "uploaded_by": ("uploadedBy", "UploadedBy"),
    "source_file_id": ("fileId", "FileId", "fileID"),
    "file_type": ("fileType", "type", "mimeType"),
    "record_id": ("id",),
}

DELETED_MARKER: Final[str] = "deleted"

# epoch values above this are milliseconds
_EPOCH_MS_THRESHOLD: Final[float] = 1e11

_DATE_FORMATS: Final[tuple[str, ...]] = (
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%d %b %Y, %H:%M",
    "%a %b %d %Y %H:%M:%S GMT%z",
    "%a %b %d %Y",
)
_TZ_NAME_SUFFIX = re.compile(r"\s*\([^)]*\)\s*$")


def normalize_record(raw: Mapping[str, object], source: SourceKind) -> CatalogEntry | None:
    """Map one raw record onto a :class:`CatalogEntry`.

    Returns ``None`` when the record is soft-deleted or has no usable locator.
    A missing title does not discard the record.
    """

    if _is_soft_deleted(raw):
        return None

    locator = _first_text(raw, "locator", strings_only=True)
    if locator is None:
        return None

    return CatalogEntry(
        title=_first_text(raw, "title") or UNTITLED,
        locator=locator,
        source=source,
        record_id=_first_text(raw, "record_id") if source is SourceKind.STORE else None,
        category=_first_text(raw, "category"),
        description=_first_text(raw, "description"),
        uploaded_by=_first_text(raw, "uploaded_by"),
        source_file_id=_first_text(raw, "source_file_id"),
        file_type=_first_text(raw, "file_type"),
        created_at=_created_at(raw),
    )


def normalize_records(
    raws: Iterable[Mapping[str, object]],
    source: SourceKind,
) -> list[CatalogEntry]:
    entries: list[CatalogEntry] = []
    skipped = 0
    for raw in raws:
        entry = normalize_record(raw, source)
        if entry is None:
            skipped += 1
            continue
        entries.append(entry)
    if skipped:
        log.debug("Discarded %s %s record(s) (deleted or without URL)", skipped, source)
    return entries


def parse_timestamp(value: object) -> datetime | None:
    """Best-effort conversion of a stored or sheet-provided date to aware UTC.

    Never raises; anything unrecognised yields ``None``.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        try:
            return _as_utc(value)
        except OverflowError:
            return None
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if isinstance(value, int | float):
        return _from_epoch(float(value))
    if isinstance(value, str):
        return _parse_date_string(value)
    return None


def _is_soft_deleted(raw: Mapping[str, object]) -> bool:
    for key in FIELD_ALIASES["deleted"]:
        value = raw.get(key)
        marker = "" if value is None else str(value).strip()
        if not marker:
            continue
        return marker.lower() == DELETED_MARKER
    return False


def _first_text(
    raw: Mapping[str, object], field: str, *, strings_only: bool = False
) -> str | None:
    for key in FIELD_ALIASES[field]:
        value = raw.get(key)
        if value is None or isinstance(value, bool):
            continue
        if isinstance(value, str):
            text = value.strip()
        elif isinstance(value, int | float) and not strings_only:
            text = str(value)
        else:
            continue
        if text:
            return text
    return None


def _created_at(raw: Mapping[str, object]) -> datetime | None:
    for key in FIELD_ALIASES["created_at"]:
        parsed = parse_timestamp(raw.get(key))
        if parsed is not None:
            return parsed
    for key in FIELD_ALIASES["uploaded_date"]:
        value = raw.get(key)
        if isinstance(value, str | datetime | date):
            parsed = parse_timestamp(value)
            if parsed is not None:
                return parsed
    return None


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _from_epoch(value: float) -> datetime | None:
    if value >= _EPOCH_MS_THRESHOLD:
        value /= 1000.0
    try:
        return datetime.fromtimestamp(value, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def _parse_date_string(value: str) -> datetime | None:
    text = value.strip()
    if not text:
        return None
    iso = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return _as_utc(datetime.fromisoformat(iso))
    except (ValueError, OverflowError):
        pass
    text = _TZ_NAME_SUFFIX.sub("", text)
    for fmt in _DATE_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))  # noqa: DTZ007
        except (ValueError, OverflowError):
            continue
    log.debug("Unparseable date %r treated as missing", value)
    return None
