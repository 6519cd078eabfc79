"""Domain model package."""

from __future__ import annotations

from .catalog import UNTITLED, CatalogEntry
from .directory import (
    District,
    Employee,
    Notification,
    Officer,
    PendingRegistration,
    Station,
    UsefulLink,
)
from .enums import Collection, HostKind, NotificationTarget, SourceKind, StaffCategory
from .rank import RankDefinition

__all__ = [
    "UNTITLED",
    "CatalogEntry",
    "Collection",
    "District",
    "Employee",
    "HostKind",
    "Notification",
    "NotificationTarget",
    "Officer",
    "PendingRegistration",
    "RankDefinition",
    "SourceKind",
    "StaffCategory",
    "Station",
    "UsefulLink",
]
