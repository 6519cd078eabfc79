from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.engine import Engine  # noqa: TC002

from pmdadmin.adapters.sqlalchemy import SqlAlchemyRecordStore
from pmdadmin.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    build_engine,
    shutdown,
    startup,
)
from tests.helpers.stores import FakeRecordStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = build_engine("sqlite+pysqlite:///:memory:")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def sqlite_record_store(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> SqlAlchemyRecordStore:
    return SqlAlchemyRecordStore(uow_factory=sqlite_unit_of_work)


@pytest.fixture
def record_store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def catalog_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCUMENTS_API_URL", "https://script.example.com/documents/exec")
    monkeypatch.setenv("GALLERY_API_URL", "https://script.example.com/gallery/exec")
    monkeypatch.setenv("APPS_SCRIPT_SECRET_TOKEN", "test-token")
    monkeypatch.delenv("DOCUMENTS_GET_ACTION", raising=False)
    monkeypatch.delenv("GALLERY_GET_ACTION", raising=False)
