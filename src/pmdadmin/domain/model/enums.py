"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SourceKind(StrEnum):
    """Backend a catalog record was read from."""

    STORE = "store"
    CATALOG = "catalog"


class HostKind(StrEnum):
    FIREBASE = "firebase"
    GDRIVE = "gdrive"
    UNKNOWN = "unknown"


class StaffCategory(StrEnum):
    POLICE = "POLICE"
    MINISTERIAL = "MINISTERIAL"


class NotificationTarget(StrEnum):
    SINGLE = "SINGLE"
    STATION = "STATION"
    DISTRICT = "DISTRICT"
    ADMIN = "ADMIN"
    ALL = "ALL"


class Collection(StrEnum):
    """Record store collection names."""

    EMPLOYEES = "employees"
    OFFICERS = "officers"
    DISTRICTS = "districts"
    STATIONS = "stations"
    RANKS = "rankMaster"
    DOCUMENTS = "documents"
    GALLERY = "gallery"
    USEFUL_LINKS = "useful_links"
    PENDING_REGISTRATIONS = "pending_registrations"
    NOTIFICATIONS = "notifications_queue"
    ADMIN_NOTIFICATIONS = "admin_notifications"
