from __future__ import annotations

import pytest

from pmdadmin.domain.model import CatalogEntry, HostKind, SourceKind
from pmdadmin.domain.reconciliation import classify_host, identity_key, match_keys


def _entry(**overrides: object) -> CatalogEntry:
    values: dict[str, object] = {
        "title": "Form A",
        "locator": "https://storage.googleapis.com/bucket/a.pdf",
        "source": SourceKind.STORE,
    }
    values.update(overrides)
    return CatalogEntry(**values)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("locator", "expected"),
    [
        ("https://storage.googleapis.com/bucket/a.pdf", HostKind.FIREBASE),
        ("https://pmd.firebasestorage.app/o/a.pdf", HostKind.FIREBASE),
        ("https://drive.google.com/uc?id=ABC", HostKind.GDRIVE),
        ("https://lh3.googleusercontent.com/d/ABC", HostKind.GDRIVE),
        ("https://example.com/a.pdf", HostKind.UNKNOWN),
    ],
)
def test_classify_host(locator: str, expected: HostKind) -> None:
    assert classify_host(locator) is expected


def test_store_record_id_has_highest_precedence() -> None:
    entry = _entry(record_id="d1", source_file_id="F1")

    assert identity_key(entry, SourceKind.STORE) == "store_d1"


def test_record_id_is_ignored_for_catalog_entries() -> None:
    entry = _entry(source=SourceKind.CATALOG, record_id="row-1", source_file_id="F1")

    assert identity_key(entry, SourceKind.CATALOG) == "catalog_F1"


def test_file_id_prefix_follows_source() -> None:
    entry = _entry(source_file_id="F1")

    assert identity_key(entry, SourceKind.STORE) == "store_F1"
    assert identity_key(entry, SourceKind.CATALOG) == "catalog_F1"


def test_locator_key_includes_host_kind_and_full_url() -> None:
    entry = _entry(locator="https://drive.google.com/uc?id=ABC")

    assert identity_key(entry, SourceKind.CATALOG) == "gdrive_https://drive.google.com/uc?id=ABC"


def test_title_fallback_is_unique_per_call() -> None:
    entry = _entry(locator="")

    first = identity_key(entry, SourceKind.CATALOG, suffix=lambda: "one")
    second = identity_key(entry, SourceKind.CATALOG, suffix=lambda: "two")

    assert first == "catalog_Form A_one"
    assert first != second
    assert identity_key(entry, SourceKind.CATALOG) != identity_key(entry, SourceKind.CATALOG)


def test_match_keys_cover_locator_and_file_id() -> None:
    entry = _entry(source_file_id="F1")

    assert match_keys(entry) == (
        ("locator", "https://storage.googleapis.com/bucket/a.pdf"),
        ("file", "F1"),
    )
