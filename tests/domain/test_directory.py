from __future__ import annotations

import pytest

from pmdadmin.domain.directory import (
    DirectoryService,
    dedupe_employees,
    display_rank,
    normalize_photo_url,
)
from pmdadmin.domain.errors import (
    NotificationValidationError,
    RecordStoreError,
    SecondaryIdRequiredError,
)
from pmdadmin.domain.model import (
    District,
    Employee,
    Notification,
    NotificationTarget,
    PendingRegistration,
    RankDefinition,
    Station,
)
from pmdadmin.domain.ranks import RankService
from tests.helpers.stores import FakeRecordStore

DRIVE_ID = "1AbCdEfGhIjKlMnOpQrStUvWxYz_-12"


def _employee(kgid: str, name: str, **overrides: object) -> Employee:
    values: dict[str, object] = {
        "kgid": kgid,
        "name": name,
        "mobile1": "9000000000",
        "district": "Mysuru",
        "station": "Town",
    }
    values.update(overrides)
    return Employee(**values)  # type: ignore[arg-type]


@pytest.fixture
def store() -> FakeRecordStore:
    store = FakeRecordStore()
    ranks = RankService(store)
    ranks.create_rank(
        RankDefinition(
            id="HC",
            label="Head Constable",
            equivalent_code="HC",
            seniority_order=9,
            requires_secondary_id=True,
        )
    )
    ranks.create_rank(
        RankDefinition(id="PSI", label="Sub-Inspector", equivalent_code="PSI", seniority_order=6)
    )
    return store


@pytest.fixture
def service(store: FakeRecordStore) -> DirectoryService:
    return DirectoryService(store, RankService(store))


def test_display_rank() -> None:
    assert display_rank("HC", "1234") == "HC 1234"
    assert display_rank("PSI", None) == "PSI"
    assert display_rank(None, "1234") is None


def test_normalize_photo_url_rewrites_drive_links_only() -> None:
    drive = f"https://drive.google.com/uc?export=view&id={DRIVE_ID}"

    assert normalize_photo_url(drive) == f"https://lh3.googleusercontent.com/d/{DRIVE_ID}"
    assert normalize_photo_url("https://h/p.jpg") == "https://h/p.jpg"
    assert normalize_photo_url(None) is None


def test_dedupe_employees_keeps_first_per_kgid(caplog: pytest.LogCaptureFixture) -> None:
    employees = [
        _employee("K1", "Asha"),
        _employee(" k1 ", "Asha duplicate"),
        _employee("K2", "Bala"),
        _employee("", "No kgid"),
    ]

    unique = dedupe_employees(employees)

    assert [employee.name for employee in unique] == ["Asha", "Bala"]
    assert "Duplicate employee kgid" in caplog.text


def test_list_employees_sorted_deduped_with_cdn_photos(
    store: FakeRecordStore, service: DirectoryService
) -> None:
    store.seed(
        "employees",
        {"kgid": "K2", "name": "Bala", "photoUrl": f"https://drive.google.com/file/d/{DRIVE_ID}"},
        {"kgid": "K1", "name": "Asha"},
        {"kgid": "k1", "name": "Zed duplicate"},
    )

    employees = service.list_employees()

    assert [employee.name for employee in employees] == ["Asha", "Bala"]
    assert employees[1].photo_url == f"https://lh3.googleusercontent.com/d/{DRIVE_ID}"


def test_create_employee_requires_metal_number_for_rank(
    store: FakeRecordStore, service: DirectoryService
) -> None:
    with pytest.raises(SecondaryIdRequiredError):
        service.create_employee(_employee("K1", "Asha", rank="HC"))

    assert store.records("employees") == []


def test_rank_edits_apply_to_next_employee_write(store: FakeRecordStore) -> None:
    ranks = RankService(store)
    service = DirectoryService(store, ranks)
    service.create_employee(_employee("K1", "Asha", rank="PSI"))

    ranks.update_rank("PSI", {"requiresMetalNumber": True})

    with pytest.raises(SecondaryIdRequiredError):
        service.create_employee(_employee("K2", "Ravi", rank="PSI"))


def test_create_employee_sets_display_rank(
    store: FakeRecordStore, service: DirectoryService
) -> None:
    employee_id = service.create_employee(
        _employee("K1", "Asha", rank="HC", metal_number="1234")
    )

    record = store.collections["employees"][employee_id]
    assert record["displayRank"] == "HC 1234"
    assert record["metalNumber"] == "1234"


def test_update_employee_recomputes_display_rank(
    store: FakeRecordStore, service: DirectoryService
) -> None:
    employee_id = service.create_employee(_employee("K1", "Asha", rank="PSI"))

    service.update_employee(employee_id, {"rank": "HC", "metalNumber": "77"})

    assert store.collections["employees"][employee_id]["displayRank"] == "HC 77"


def test_update_employee_validates_merged_values(service: DirectoryService) -> None:
    employee_id = service.create_employee(_employee("K1", "Asha", rank="PSI"))

    with pytest.raises(SecondaryIdRequiredError):
        service.update_employee(employee_id, {"rank": "HC"})


def test_unranked_service_skips_metal_number_validation() -> None:
    service = DirectoryService(FakeRecordStore())

    service.create_employee(_employee("K1", "Asha", rank="HC"))


def test_list_districts_prefers_active(store: FakeRecordStore, service: DirectoryService) -> None:
    store.seed(
        "districts",
        {"name": "Udupi", "isActive": True},
        {"name": "Bagalkot", "isActive": False},
        {"name": "Mysuru"},
    )

    assert [district.name for district in service.list_districts()] == ["Mysuru", "Udupi"]


def test_list_districts_falls_back_to_all(
    store: FakeRecordStore, service: DirectoryService
) -> None:
    store.seed("districts", {"name": "Udupi", "isActive": False})

    assert [district.name for district in service.list_districts()] == ["Udupi"]


def test_create_district_and_station_are_active(
    store: FakeRecordStore, service: DirectoryService
) -> None:
    district_id = service.create_district(District(name="Udupi", is_active=False))
    station_id = service.create_station(Station(name="Town", district="Udupi", is_active=False))

    assert store.collections["districts"][district_id]["isActive"] is True
    assert store.collections["stations"][station_id]["isActive"] is True


def test_list_stations_filters_by_district_and_sorts_client_side() -> None:
    store = FakeRecordStore(ordered_queries=False)
    store.seed(
        "stations",
        {"name": "Town", "district": "Udupi"},
        {"name": "Brahmavar", "district": "Udupi"},
        {"name": "Nazarbad", "district": "Mysuru"},
    )
    service = DirectoryService(store)

    assert [station.name for station in service.list_stations("Udupi")] == ["Brahmavar", "Town"]


def test_approve_registration_creates_employee_and_removes_request(
    store: FakeRecordStore, service: DirectoryService
) -> None:
    store.seed(
        "pending_registrations",
        {
            "id": "r1",
            "kgid": "K9",
            "email": "new@pmd.com",
            "name": "Chitra",
            "mobile1": "9",
            "district": "Udupi",
            "station": "Town",
            "pin": "1111",
        },
    )
    (registration,) = service.list_pending_registrations()

    employee_id = service.approve_registration(registration)

    record = store.collections["employees"][employee_id]
    assert record["isApproved"] is True
    assert record["isAdmin"] is False
    assert record["kgid"] == "K9"
    assert store.records("pending_registrations") == []


def test_pending_registrations_fallbacks() -> None:
    unordered = FakeRecordStore(ordered_queries=False)
    unordered.seed("pending_registrations", {"id": "r1", "kgid": "K1"})
    failing = FakeRecordStore(fail_with=RecordStoreError("offline"))

    assert [r.kgid for r in DirectoryService(unordered).list_pending_registrations()] == ["K1"]
    assert DirectoryService(failing).list_pending_registrations() == []


def test_reject_registration(store: FakeRecordStore, service: DirectoryService) -> None:
    store.seed("pending_registrations", {"id": "r1", "kgid": "K1"})

    service.reject_registration("r1")

    assert store.records("pending_registrations") == []


@pytest.mark.parametrize(
    ("admin", "collection"),
    [(False, "notifications_queue"), (True, "admin_notifications")],
)
def test_enqueue_notification_routes_by_audience(
    store: FakeRecordStore, service: DirectoryService, admin: bool, collection: str
) -> None:
    notification = Notification(
        title="Parade",
        body="Tomorrow 7am",
        target_type=NotificationTarget.DISTRICT,
        target_district="Udupi",
    )

    record_id = service.enqueue_notification(notification, admin=admin)

    record = store.collections[collection][record_id]
    assert record["status"] == "pending"
    assert record["targetType"] == "DISTRICT"
    assert record["targetDistrict"] == "Udupi"


@pytest.mark.parametrize(
    ("target", "fields"),
    [
        (NotificationTarget.SINGLE, {}),
        (NotificationTarget.STATION, {"target_district": "Udupi"}),
        (NotificationTarget.DISTRICT, {"target_station": "Town"}),
    ],
)
def test_enqueue_notification_requires_target_fields(
    store: FakeRecordStore,
    service: DirectoryService,
    target: NotificationTarget,
    fields: dict[str, str],
) -> None:
    notification = Notification(title="t", body="b", target_type=target, **fields)

    with pytest.raises(NotificationValidationError):
        service.enqueue_notification(notification)

    assert store.records("notifications_queue") == []


def test_employee_stats(store: FakeRecordStore, service: DirectoryService) -> None:
    store.seed(
        "employees",
        {"kgid": "K1", "name": "A", "district": "Udupi", "station": "Town", "rank": "HC"},
        {"kgid": "K2", "name": "B", "district": "Udupi", "station": "Kapu", "rank": "HC"},
        {"kgid": "K3", "name": "C", "district": "Mysuru", "station": "Town", "rank": "PSI"},
    )
    for record in store.records("employees"):
        record["isApproved"] = record["kgid"] != "K2"
    store.seed("districts", {"name": "Udupi"}, {"name": "Mysuru"})
    store.seed("stations", {"name": "Town", "district": "Udupi"})

    stats = service.employee_stats()

    assert stats.total == 3
    assert stats.approved == 2
    assert stats.pending == 1
    assert stats.by_district == {"Udupi": 2, "Mysuru": 1}
    assert stats.by_station == {"Town": 2, "Kapu": 1}
    assert stats.by_rank == {"HC": 2, "PSI": 1}
    assert stats.districts_count == 2
    assert stats.stations_count == 1
