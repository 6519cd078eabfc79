"""Local files: the record database and the catalog listing cache."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

DATABASE_FILENAME: Final[str] = "pmdadmin.db"
LISTING_CACHE_FILENAME: Final[str] = "listing_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_uri: str

    def listing_cache_path(self) -> Path:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir / LISTING_CACHE_FILENAME


def _platform_data_dir() -> Path:
    if os.name == "nt":
        root = optional_env_var("LOCALAPPDATA")
        base = Path(root) if root else Path.home() / "AppData" / "Local"
    else:
        root = optional_env_var("XDG_DATA_HOME")
        base = Path(root) if root else Path.home() / ".local" / "share"
    return base / "pmdadmin"


def get_storage_config() -> StorageConfig:
    """Resolve ``PMDADMIN_DATA_DIR`` and ``DATABASE_URI``.

    Without ``DATABASE_URI`` the records live in a SQLite file inside the data
    directory, which is created on demand.
    """

    configured_dir = optional_env_var("PMDADMIN_DATA_DIR")
    data_dir = Path(configured_dir) if configured_dir else _platform_data_dir()
    data_dir = data_dir.expanduser().resolve()

    database_uri = optional_env_var("DATABASE_URI")
    if database_uri is None:
        data_dir.mkdir(parents=True, exist_ok=True)
        database_uri = f"sqlite+pysqlite:///{data_dir / DATABASE_FILENAME}"
    return StorageConfig(data_dir=data_dir, database_uri=database_uri)
