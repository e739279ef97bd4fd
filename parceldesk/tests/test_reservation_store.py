from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from parceldesk.core.entities.reservation import Proof, ProofKind, Reservation, ReservationEvent, ReservationStatus
from parceldesk.core.errors import PersistenceError
from parceldesk.core.use_cases.stage_reservation import MarkReadyUseCase
from parceldesk.infrastructure.repositories.json_document_persistence_impl import JsonDocumentPersistence
from parceldesk.infrastructure.repositories.reservation_repository_impl import ReservationRepositoryImpl

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _reservation(reservation_id: str, *, status=ReservationStatus.RESERVED, tracking: str | None = None) -> Reservation:
    reservation = Reservation(
        id=reservation_id,
        item_description="box",
        created_at=T0,
        updated_at=T0,
        status=status,
        tracking_number=tracking,
    )
    reservation.record_event(event_type="reserved", actor="customer", at=T0, note="Reservation created")
    return reservation


def test_load_without_document_starts_empty(tmp_path: Path) -> None:
    store = ReservationRepositoryImpl(JsonDocumentPersistence(file_path=tmp_path / "db.json"))

    assert store.load() == 0
    assert store.list_by_status() == []


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[]",
        '{"something": []}',
        '{"reservations": [{"id": "R1"}]}',
        '{"reservations": ["R1"]}',
        '{"reservations": [{"id": "R1", "itemDescription": "box", "status": "reserved", "proof": "porch",'
        ' "createdAt": "2024-05-01T10:00:00Z", "updatedAt": "2024-05-01T10:00:00Z"}]}',
        '{"reservations": [{"id": "R1", "itemDescription": "box", "status": "reserved",'
        ' "createdAt": 1714557600000, "updatedAt": 1714557600000}]}',
    ],
)
def test_load_unparsable_document_falls_back_to_empty(tmp_path: Path, content: str) -> None:
    path = tmp_path / "db.json"
    path.write_text(content, encoding="utf-8")
    store = ReservationRepositoryImpl(JsonDocumentPersistence(file_path=path))

    assert store.load() == 0
    assert store.list_by_status() == []


def test_load_survives_read_errors(persistence) -> None:
    persistence.fail_reads = True
    store = ReservationRepositoryImpl(persistence)

    assert store.load() == 0


def test_find_by_id_or_tracking_number_returns_same_record(store) -> None:
    store.upsert(_reservation("R1", tracking="T-1"))
    store.upsert(_reservation("R2"))

    by_id = store.find_by_id("R1")
    by_tracking = store.find_by_id("T-1")

    assert by_id is not None
    assert by_id == by_tracking
    assert store.find_by_id("R3") is None
    assert store.find_by_id("T-2") is None


def test_find_returns_detached_copy(store) -> None:
    store.upsert(_reservation("R1"))

    copy = store.find_by_id("R1")
    copy.status = ReservationStatus.DELIVERED
    copy.events.clear()

    stored = store.find_by_id("R1")
    assert stored.status is ReservationStatus.RESERVED
    assert len(stored.events) == 1


def test_upsert_inserts_then_replaces_in_storage_order(store, persistence) -> None:
    store.upsert(_reservation("R1"))
    store.upsert(_reservation("R2"))
    store.upsert(_reservation("R3"))

    updated = store.find_by_id("R2")
    updated.status = ReservationStatus.READY
    store.upsert(updated)

    assert [r.id for r in store.list_by_status()] == ["R1", "R2", "R3"]
    assert [r["id"] for r in persistence.document["reservations"]] == ["R1", "R2", "R3"]
    assert persistence.document["reservations"][1]["status"] == "ready"
    assert persistence.writes == 4


def test_list_by_status_filters(store) -> None:
    store.upsert(_reservation("R1"))
    store.upsert(_reservation("R2", status=ReservationStatus.READY))
    store.upsert(_reservation("R3", status=ReservationStatus.CHECKED_IN))
    store.upsert(_reservation("R4", status=ReservationStatus.READY))

    assert [r.id for r in store.list_by_status(ReservationStatus.READY)] == ["R2", "R4"]
    assert [r.id for r in store.list_by_status(ReservationStatus.DELIVERED)] == []
    staged = store.list_by_statuses([ReservationStatus.CHECKED_IN, ReservationStatus.READY])
    assert [r.id for r in staged] == ["R2", "R3", "R4"]


def test_failed_write_surfaces_and_keeps_memory_consistent(store, persistence) -> None:
    store.upsert(_reservation("R1"))
    persistence.fail_writes = True

    changed = store.find_by_id("R1")
    changed.status = ReservationStatus.DELIVERED
    with pytest.raises(PersistenceError):
        store.upsert(changed)
    with pytest.raises(PersistenceError):
        store.upsert(_reservation("R2"))

    assert store.find_by_id("R1").status is ReservationStatus.RESERVED
    assert store.find_by_id("R2") is None


def test_persist_then_reload_round_trips(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    reservation = _reservation("R1", tracking="T-1")
    reservation.customer_name = "Ada"
    reservation.storage_location = "Shelf 4"
    reservation.set_tags(["fragile", "cold"])
    reservation.driver_id = "driver-9"
    reservation.status = ReservationStatus.DELIVERED
    reservation.proof = Proof(kind=ProofKind.PHOTO, value="/uploads/abc.jpg")
    reservation.record_event(event_type="claimed", actor="driver", at=T0.replace(minute=5), note="Claimed by driver-9")
    reservation.record_event(event_type="delivered", actor="driver", at=T0.replace(minute=9), note="Delivered")

    first = ReservationRepositoryImpl(JsonDocumentPersistence(file_path=path))
    first.load()
    first.upsert(reservation)
    first.upsert(_reservation("R2"))

    second = ReservationRepositoryImpl(JsonDocumentPersistence(file_path=path))
    assert second.load() == 2

    assert second.list_by_status() == first.list_by_status()
    assert second.find_by_id("T-1") == reservation
    assert [e.event_type for e in second.find_by_id("R1").events] == ["reserved", "claimed", "delivered"]


def test_document_layout_uses_camel_case_keys(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    store = ReservationRepositoryImpl(JsonDocumentPersistence(file_path=path))
    store.upsert(_reservation("R1", tracking="T-1"))

    document = json.loads(path.read_text(encoding="utf-8"))

    record = document["reservations"][0]
    assert record["trackingNumber"] == "T-1"
    assert record["itemDescription"] == "box"
    assert record["frontDeskTags"] == []
    assert record["proof"] is None
    assert record["events"] == [
        {
            "eventType": "reserved",
            "actor": "customer",
            "timestamp": T0.isoformat(),
            "note": "Reservation created",
        }
    ]
    assert list(tmp_path.iterdir()) == [path]


def test_load_reads_legacy_documents(tmp_path: Path) -> None:
    path = tmp_path / "db.json"
    path.write_text(
        json.dumps(
            {
                "reservations": [
                    {
                        "id": "RABC123",
                        "trackingNumber": None,
                        "itemDescription": "lamp",
                        "status": "stored",
                        "frontDeskTags": [],
                        "proof": {"type": "text", "value": "porch"},
                        "createdAt": "2024-05-01T10:00:00.000Z",
                        "updatedAt": "2024-05-01T10:00:00.000Z",
                        "events": [
                            {
                                "eventType": "reserved",
                                "actor": "customer",
                                "timestamp": "2024-05-01T10:00:00.000Z",
                                "note": "Reservation created",
                            }
                        ],
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    store = ReservationRepositoryImpl(JsonDocumentPersistence(file_path=path))

    assert store.load() == 1
    reservation = store.find_by_id("RABC123")
    assert reservation.status is ReservationStatus.READY
    assert reservation.proof == Proof(kind=ProofKind.TEXT, value="porch")
    assert reservation.created_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert reservation.events[0] == ReservationEvent(
        event_type="reserved",
        actor="customer",
        timestamp=datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc),
        note="Reservation created",
    )


def test_timestamps_without_offset_load_as_utc_and_stay_writable(tmp_path: Path, clock) -> None:
    path = tmp_path / "db.json"
    path.write_text(
        json.dumps(
            {
                "reservations": [
                    {
                        "id": "R1",
                        "itemDescription": "lamp",
                        "status": "checked_in",
                        "createdAt": "2024-05-01T10:00:00",
                        "updatedAt": "2024-05-01T10:00:00",
                        "events": [
                            {"eventType": "reserved", "actor": "customer", "timestamp": "2024-05-01T10:00:00"},
                        ],
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    store = ReservationRepositoryImpl(JsonDocumentPersistence(file_path=path))
    assert store.load() == 1
    loaded = store.find_by_id("R1")
    assert loaded.created_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    ready = MarkReadyUseCase(reservation_repo=store, clock=clock).execute(key="R1", actor="store")

    assert ready.status is ReservationStatus.READY
    assert [e.event_type for e in ready.events] == ["reserved", "marked_ready"]
    assert all(e.timestamp.tzinfo is not None for e in ready.events)
    assert ready.updated_at == ready.events[-1].timestamp
