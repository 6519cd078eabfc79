"""Directory services over the record store.

Employees, officers, districts, stations and useful links are plain
collections; the services add the listing order, de-duplication and the few
derived fields the mobile app reads (``displayRank``, CDN photo links).
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pmdadmin.domain.errors import (
    NotificationValidationError,
    RecordNotFoundError,
    RecordStoreError,
    UnsupportedQueryError,
)
from pmdadmin.domain.links import drive_file_id, image_cdn_url
from pmdadmin.domain.model import (
    Collection,
    District,
    Employee,
    NotificationTarget,
    Officer,
    PendingRegistration,
    Station,
    UsefulLink,
)
from pmdadmin.domain.ports import NEWEST_FIRST, OrderSpec
from pmdadmin.domain.ranks import validate_secondary_id

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from pmdadmin.domain.model import Notification, RankDefinition
    from pmdadmin.domain.ports import RawRecord, RecordStore
    from pmdadmin.domain.ranks import RankService

log = logging.getLogger(__name__)

BY_NAME = OrderSpec("name")
PENDING = "pending"


def display_rank(rank: str | None, metal_number: str | None) -> str | None:
    if rank and metal_number:
        return f"{rank} {metal_number}"
    return rank or None


def normalize_photo_url(url: str | None) -> str | None:
    """Rewrite Drive share links to the image CDN form."""
    if not url or "drive.google.com" not in url or drive_file_id(url) is None:
        return url
    return image_cdn_url(url)


def dedupe_employees(employees: Sequence[Employee]) -> list[Employee]:
    """Keep the first employee per case-insensitive kgid; blank kgids are dropped."""

    seen: set[str] = set()
    unique: list[Employee] = []
    for employee in employees:
        key = employee.kgid.strip().lower()
        if not key:
            continue
        if key in seen:
            log.warning("Duplicate employee kgid %s, keeping first occurrence", employee.kgid)
            continue
        seen.add(key)
        unique.append(employee)
    return unique


def validate_notification(notification: Notification) -> None:
    target = notification.target_type
    if not notification.title.strip() or not notification.body.strip():
        raise NotificationValidationError("Title and body are required")
    if target is NotificationTarget.SINGLE and not notification.target_kgid:
        raise NotificationValidationError("KGID is required for a single recipient")
    if target is NotificationTarget.STATION and not (
        notification.target_district and notification.target_station
    ):
        raise NotificationValidationError("District and station are required")
    if target is NotificationTarget.DISTRICT and not notification.target_district:
        raise NotificationValidationError("District is required")


@dataclass(frozen=True, slots=True)
class EmployeeStats:
    total: int
    approved: int
    pending: int
    by_district: dict[str, int]
    by_station: dict[str, int]
    by_rank: dict[str, int]
    districts_count: int
    stations_count: int


@dataclass(slots=True)
class DirectoryService:
    record_store: RecordStore
    rank_service: RankService | None = None

    # employees -----------------------------------------------------------

    def list_employees(self) -> list[Employee]:
        employees = [Employee.from_record(r) for r in self._ordered(Collection.EMPLOYEES)]
        unique = dedupe_employees(employees)
        for employee in unique:
            employee.photo_url = normalize_photo_url(employee.photo_url)
        return unique

    def get_employee(self, employee_id: str) -> Employee | None:
        record = self.record_store.get_by_id(Collection.EMPLOYEES, employee_id)
        return Employee.from_record(record) if record is not None else None

    def create_employee(self, employee: Employee) -> str:
        validate_secondary_id(self._rank_list(), employee.rank, employee.metal_number)
        employee.display_rank = display_rank(employee.rank, employee.metal_number)
        return self.record_store.create(Collection.EMPLOYEES, employee.to_record())

    def update_employee(self, employee_id: str, changes: Mapping[str, object]) -> None:
        updates = dict(changes)
        if "rank" in changes or "metalNumber" in changes:
            current = self.record_store.get_by_id(Collection.EMPLOYEES, employee_id)
            if current is None:
                raise RecordNotFoundError(Collection.EMPLOYEES, employee_id)
            merged = {**current, **changes}
            rank = _text(merged.get("rank"))
            metal_number = _text(merged.get("metalNumber"))
            validate_secondary_id(self._rank_list(), rank, metal_number)
            updates["displayRank"] = display_rank(rank, metal_number)
        self.record_store.update(Collection.EMPLOYEES, employee_id, updates)

    def delete_employee(self, employee_id: str) -> None:
        self.record_store.delete(Collection.EMPLOYEES, employee_id)

    # officers ------------------------------------------------------------

    def list_officers(self) -> list[Officer]:
        return [Officer.from_record(r) for r in self._ordered(Collection.OFFICERS)]

    def create_officer(self, officer: Officer) -> str:
        return self.record_store.create(Collection.OFFICERS, officer.to_record())

    def update_officer(self, officer_id: str, changes: Mapping[str, object]) -> None:
        self.record_store.update(Collection.OFFICERS, officer_id, changes)

    def delete_officer(self, officer_id: str) -> None:
        self.record_store.delete(Collection.OFFICERS, officer_id)

    # districts and stations ---------------------------------------------

    def list_districts(self) -> list[District]:
        districts = [District.from_record(r) for r in self._ordered(Collection.DISTRICTS)]
        return [d for d in districts if d.is_active] or districts

    def create_district(self, district: District) -> str:
        district.is_active = True
        return self.record_store.create(Collection.DISTRICTS, district.to_record())

    def update_district(self, district_id: str, changes: Mapping[str, object]) -> None:
        self.record_store.update(Collection.DISTRICTS, district_id, changes)

    def delete_district(self, district_id: str) -> None:
        self.record_store.delete(Collection.DISTRICTS, district_id)

    def list_stations(self, district: str | None = None) -> list[Station]:
        filters = {"district": district} if district else None
        records = self._ordered(Collection.STATIONS, filters=filters)
        return [Station.from_record(r) for r in records]

    def create_station(self, station: Station) -> str:
        station.is_active = True
        return self.record_store.create(Collection.STATIONS, station.to_record())

    def update_station(self, station_id: str, changes: Mapping[str, object]) -> None:
        self.record_store.update(Collection.STATIONS, station_id, changes)

    def delete_station(self, station_id: str) -> None:
        self.record_store.delete(Collection.STATIONS, station_id)

    # useful links --------------------------------------------------------

    def list_useful_links(self) -> list[UsefulLink]:
        return [UsefulLink.from_record(r) for r in self._ordered(Collection.USEFUL_LINKS)]

    def create_useful_link(self, link: UsefulLink) -> str:
        return self.record_store.create(Collection.USEFUL_LINKS, link.to_record())

    def update_useful_link(self, link_id: str, changes: Mapping[str, object]) -> None:
        self.record_store.update(Collection.USEFUL_LINKS, link_id, changes)

    def delete_useful_link(self, link_id: str) -> None:
        self.record_store.delete(Collection.USEFUL_LINKS, link_id)

    # registrations -------------------------------------------------------

    def list_pending_registrations(self) -> list[PendingRegistration]:
        collection = Collection.PENDING_REGISTRATIONS
        try:
            try:
                records = self.record_store.query(collection, order=NEWEST_FIRST)
            except UnsupportedQueryError:
                log.warning("Ordered query unsupported for %s, fetching unordered", collection)
                records = self.record_store.query(collection)
        except RecordStoreError as exc:
            log.error("Could not load pending registrations: %s", exc)
            return []
        return [PendingRegistration.from_record(r) for r in records]

    def approve_registration(self, registration: PendingRegistration) -> str:
        if registration.id is None:
            raise RecordNotFoundError(Collection.PENDING_REGISTRATIONS, "")
        employee_id = self.record_store.create(
            Collection.EMPLOYEES, registration.to_employee().to_record()
        )
        self.record_store.delete(Collection.PENDING_REGISTRATIONS, registration.id)
        log.info("Approved registration %s as employee %s", registration.kgid, employee_id)
        return employee_id

    def reject_registration(self, registration_id: str) -> None:
        self.record_store.delete(Collection.PENDING_REGISTRATIONS, registration_id)

    # notifications -------------------------------------------------------

    def enqueue_notification(self, notification: Notification, *, admin: bool = False) -> str:
        validate_notification(notification)
        collection = Collection.ADMIN_NOTIFICATIONS if admin else Collection.NOTIFICATIONS
        return self.record_store.create(
            collection, {**notification.to_record(), "status": PENDING}
        )

    # statistics ----------------------------------------------------------

    def employee_stats(self) -> EmployeeStats:
        employees = self.list_employees()
        approved = sum(1 for employee in employees if employee.is_approved)
        return EmployeeStats(
            total=len(employees),
            approved=approved,
            pending=len(employees) - approved,
            by_district=dict(Counter(e.district for e in employees if e.district)),
            by_station=dict(Counter(e.station for e in employees if e.station)),
            by_rank=dict(Counter(e.rank for e in employees if e.rank)),
            districts_count=len(self.list_districts()),
            stations_count=len(self.list_stations()),
        )

    # helpers -------------------------------------------------------------

    def _rank_list(self) -> list[RankDefinition]:
        if self.rank_service is None:
            return []
        return self.rank_service.list_ranks()

    def _ordered(
        self,
        collection: str,
        *,
        filters: Mapping[str, object] | None = None,
        order: OrderSpec = BY_NAME,
    ) -> Sequence[RawRecord]:
        try:
            return self.record_store.query(collection, filters=filters, order=order)
        except UnsupportedQueryError:
            log.warning("Ordered query unsupported for %s, sorting client-side", collection)
        records = self.record_store.query(collection, filters=filters)
        return sorted(records, key=lambda r: str(r.get(order.field) or ""))


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
