"""Adapter for the spreadsheet-script document and gallery catalogs."""

from __future__ import annotations

from .client import AppsScriptCatalog
from .schema import WriteResponse, unwrap_listing

__all__ = ["AppsScriptCatalog", "WriteResponse", "unwrap_listing"]
