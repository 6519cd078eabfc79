"""Directory records kept in the record store (employees, stations, ...)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Self

from .enums import NotificationTarget


def _str(record: Mapping[str, object], key: str, default: str = "") -> str:
    value = record.get(key)
    return default if value is None else str(value)


def _opt(record: Mapping[str, object], key: str) -> str | None:
    value = record.get(key)
    if value is None:
        return None
    text = str(value)
    return text or None


def _when(record: Mapping[str, object], key: str) -> datetime | None:
    value = record.get(key)
    return value if isinstance(value, datetime) else None


def _compact(payload: dict[str, object]) -> dict[str, object]:
    """Drop unset optional fields; the store keeps absent and None apart."""
    return {key: value for key, value in payload.items() if value is not None}


@dataclass(kw_only=True)
class Employee:
    kgid: str
    name: str
    mobile1: str
    district: str
    station: str
    id: str | None = None
    email: str | None = None
    mobile2: str | None = None
    rank: str | None = None
    metal_number: str | None = None
    display_rank: str | None = None
    blood_group: str | None = None
    photo_url: str | None = None
    is_admin: bool = False
    is_approved: bool = False
    pin: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> Self:
        return cls(
            id=_opt(record, "id"),
            kgid=_str(record, "kgid"),
            name=_str(record, "name"),
            mobile1=_str(record, "mobile1"),
            district=_str(record, "district"),
            station=_str(record, "station"),
            email=_opt(record, "email"),
            mobile2=_opt(record, "mobile2"),
            rank=_opt(record, "rank"),
            metal_number=_opt(record, "metalNumber"),
            display_rank=_opt(record, "displayRank"),
            blood_group=_opt(record, "bloodGroup"),
            photo_url=_opt(record, "photoUrl") or _opt(record, "photoUrlFromGoogle"),
            is_admin=bool(record.get("isAdmin", False)),
            is_approved=bool(record.get("isApproved", False)),
            pin=_opt(record, "pin"),
            created_at=_when(record, "createdAt"),
        )

    def to_record(self) -> dict[str, object]:
        return _compact(
            {
                "kgid": self.kgid,
                "name": self.name,
                "mobile1": self.mobile1,
                "district": self.district,
                "station": self.station,
                "email": self.email,
                "mobile2": self.mobile2,
                "rank": self.rank,
                "metalNumber": self.metal_number,
                "displayRank": self.display_rank,
                "bloodGroup": self.blood_group,
                "photoUrl": self.photo_url,
                "isAdmin": self.is_admin,
                "isApproved": self.is_approved,
                "pin": self.pin,
            }
        )


@dataclass(kw_only=True)
class Officer:
    rank: str
    name: str
    mobile: str
    district: str
    id: str | None = None
    agid: str | None = None
    email: str | None = None
    landline: str | None = None
    office: str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> Self:
        return cls(
            id=_opt(record, "id"),
            rank=_str(record, "rank"),
            name=_str(record, "name"),
            mobile=_str(record, "mobile"),
            district=_str(record, "district"),
            agid=_opt(record, "agid") or _opt(record, "cfd"),
            email=_opt(record, "email"),
            landline=_opt(record, "landline"),
            office=_opt(record, "office"),
        )

    def to_record(self) -> dict[str, object]:
        return _compact(
            {
                "rank": self.rank,
                "name": self.name,
                "mobile": self.mobile,
                "district": self.district,
                "agid": self.agid,
                "email": self.email,
                "landline": self.landline,
                "office": self.office,
            }
        )


@dataclass(kw_only=True)
class District:
    name: str
    id: str | None = None
    range: str | None = None
    is_active: bool = True

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> Self:
        return cls(
            id=_opt(record, "id"),
            name=_str(record, "name"),
            range=_opt(record, "range"),
            is_active=record.get("isActive") is not False,
        )

    def to_record(self) -> dict[str, object]:
        return _compact({"name": self.name, "range": self.range, "isActive": self.is_active})


@dataclass(kw_only=True)
class Station:
    name: str
    district: str
    id: str | None = None
    std_code: str | None = None
    is_active: bool = True

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> Self:
        return cls(
            id=_opt(record, "id"),
            name=_str(record, "name"),
            district=_str(record, "district"),
            std_code=_opt(record, "stdCode"),
            is_active=record.get("isActive") is not False,
        )

    def to_record(self) -> dict[str, object]:
        return _compact(
            {
                "name": self.name,
                "district": self.district,
                "stdCode": self.std_code,
                "isActive": self.is_active,
            }
        )


@dataclass(kw_only=True)
class UsefulLink:
    name: str
    id: str | None = None
    play_store_url: str | None = None
    apk_url: str | None = None
    icon_url: str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> Self:
        return cls(
            id=_opt(record, "id"),
            name=_str(record, "name"),
            play_store_url=_opt(record, "playStoreUrl"),
            apk_url=_opt(record, "apkUrl"),
            icon_url=_opt(record, "iconUrl"),
        )

    def to_record(self) -> dict[str, object]:
        return _compact(
            {
                "name": self.name,
                "playStoreUrl": self.play_store_url,
                "apkUrl": self.apk_url,
                "iconUrl": self.icon_url,
            }
        )


@dataclass(kw_only=True)
class PendingRegistration:
    kgid: str
    email: str
    name: str
    mobile1: str
    district: str
    station: str
    pin: str
    id: str | None = None
    mobile2: str | None = None
    rank: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> Self:
        return cls(
            id=_opt(record, "id"),
            kgid=_str(record, "kgid"),
            email=_str(record, "email"),
            name=_str(record, "name"),
            mobile1=_str(record, "mobile1"),
            district=_str(record, "district"),
            station=_str(record, "station"),
            pin=_str(record, "pin"),
            mobile2=_opt(record, "mobile2"),
            rank=_opt(record, "rank"),
            created_at=_when(record, "createdAt"),
        )

    def to_employee(self) -> Employee:
        return Employee(
            kgid=self.kgid,
            name=self.name,
            email=self.email,
            mobile1=self.mobile1,
            mobile2=self.mobile2,
            rank=self.rank,
            district=self.district,
            station=self.station,
            pin=self.pin,
            is_approved=True,
            is_admin=False,
        )


@dataclass(kw_only=True)
class Notification:
    title: str
    body: str
    target_type: NotificationTarget
    target_kgid: str | None = None
    target_district: str | None = None
    target_station: str | None = None

    def to_record(self) -> dict[str, object]:
        return _compact(
            {
                "title": self.title,
                "body": self.body,
                "targetType": self.target_type.value,
                "targetKgid": self.target_kgid,
                "targetDistrict": self.target_district,
                "targetStation": self.target_station,
            }
        )
