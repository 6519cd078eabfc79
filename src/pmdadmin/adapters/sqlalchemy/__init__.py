"""SQLAlchemy adapter package for pmdadmin."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, record_table
from .repositories import SqlAlchemyRecordRepository
from .store import SqlAlchemyRecordStore
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyRecordRepository",
    "SqlAlchemyRecordStore",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "record_table",
    "shutdown",
    "startup",
]
