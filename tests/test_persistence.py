"""
Tests for durable booking snapshot persistence.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

from app.application.use_cases.auto_dispatch import AutoDispatchUseCase
from app.application.use_cases.booking_lifecycle import BookingLifecycleUseCase
from app.domain.entities.booking import BookingStatus
from app.infrastructure.directory.static_directory import StaticProviderDirectory
from app.infrastructure.store.json_store import JsonBookingStore


def _lifecycle(store: JsonBookingStore) -> BookingLifecycleUseCase:
    return BookingLifecycleUseCase(store=store, directory=StaticProviderDirectory())


def test_missing_file_loads_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(path=str(Path(tmpdir) / "nested" / "state.json"))
        assert store.load() == ([], [])


def test_save_then_load_returns_equal_state():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(path=str(Path(tmpdir) / "state.json"))
        uc = _lifecycle(store)
        directory = StaticProviderDirectory()
        dispatch = AutoDispatchUseCase(uc, directory)

        a = uc.create_booking("Alice", "Leaky faucet", "1 Main St")
        b = uc.create_booking("Bob", "Wood Works", "2 Main St")
        dispatch.tick()
        uc.transition(a.id, BookingStatus.IN_PROGRESS, "Mario Rossi")
        uc.transition(b.id, BookingStatus.PENDING, "Admin")

        bookings, log = store.load()

        assert bookings == uc.list_bookings()
        assert log == uc.get_audit_log()
        restored_b = next(x for x in bookings if x.id == b.id)
        assert restored_b.retry_count == 1
        assert restored_b.provider_id is None
        assert restored_b.last_retry_at is not None


def test_snapshot_layout_on_disk():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "state.json"
        uc = _lifecycle(JsonBookingStore(path=str(path)))
        uc.create_booking("Alice", "Pro Cleaning", "1 Main St")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert set(data) >= {"bookings", "globalHistory"}
        assert data["bookings"][0]["customer_name"] == "Alice"
        assert data["bookings"][0]["status"] == "PENDING"
        assert data["globalHistory"][0]["from_status"] == "START"
        assert not path.with_suffix(".json.tmp").exists()


def test_restart_restores_bookings_and_log():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = str(Path(tmpdir) / "state.json")
        first = _lifecycle(JsonBookingStore(path=path))
        booking = first.create_booking("Alice", "Pro Cleaning", "1 Main St")
        first.transition(booking.id, BookingStatus.CANCELLED, "Customer")

        second = _lifecycle(JsonBookingStore(path=path))

        assert second.get_booking(booking.id).status == BookingStatus.CANCELLED
        assert [e.to_status for e in second.get_audit_log()] == ["CANCELLED", "PENDING"]


def test_clear_all_is_persisted():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = str(Path(tmpdir) / "state.json")
        uc = _lifecycle(JsonBookingStore(path=path))
        uc.create_booking("Alice", "Pro Cleaning", "1 Main St")
        uc.clear_all()

        assert uc.list_bookings() == []
        assert uc.get_audit_log() == []
        assert JsonBookingStore(path=path).load() == ([], [])


def test_corrupted_file_loads_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "state.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonBookingStore(path=str(path)).load() == ([], [])

        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert JsonBookingStore(path=str(path)).load() == ([], [])

        path.write_text('{"bookings": "nope", "globalHistory": 7}', encoding="utf-8")
        assert JsonBookingStore(path=str(path)).load() == ([], [])

        path.write_text('{"version": ' + "9" * 5000 + "}", encoding="utf-8")
        assert JsonBookingStore(path=str(path)).load() == ([], [])

        path.write_text('{"bookings": ' + "[" * 100000 + "]" * 100000 + "}", encoding="utf-8")
        assert JsonBookingStore(path=str(path)).load() == ([], [])


def test_malformed_records_are_skipped():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "state.json"
        good_event = {
            "id": "e1",
            "booking_id": "b1",
            "timestamp": 100,
            "from_status": "START",
            "to_status": "PENDING",
            "actor": "Alice",
            "notes": "Booking created by customer.",
        }
        payload = {
            "bookings": [
                {
                    "id": "b1",
                    "customer_name": "Alice",
                    "service_type": "Pro Cleaning",
                    "address": "1 Main St",
                    "status": "PENDING",
                    "created_at": 100,
                    "history": [good_event],
                },
                {"id": "b2", "status": "WHATEVER", "history": [good_event]},
                {"id": "b3", "customer_name": "Bob", "status": "PENDING", "history": []},
                {
                    "id": "b4",
                    "customer_name": "Cara",
                    "service_type": "Leak Fixer",
                    "address": "3 Main St",
                    "status": "ASSIGNED",
                    "created_at": 100,
                    "history": [
                        {**good_event, "id": "e4a", "booking_id": "b4", "timestamp": 200},
                        {
                            **good_event,
                            "id": "e4b",
                            "booking_id": "b4",
                            "timestamp": 150,
                            "from_status": "PENDING",
                            "to_status": "ASSIGNED",
                        },
                    ],
                },
                "garbage",
            ],
            "globalHistory": [good_event, {"id": 5}, None],
        }
        path.write_text(json.dumps(payload), encoding="utf-8")

        bookings, log = JsonBookingStore(path=str(path)).load()

        assert [b.id for b in bookings] == ["b1"]
        assert bookings[0].retry_count == 0
        assert bookings[0].last_retry_at is None
        assert [e.id for e in log] == ["e1"]


def test_unwritable_location_does_not_break_lifecycle():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "state.json"
        store = JsonBookingStore(path=str(path))
        uc = _lifecycle(store)
        # A directory where the snapshot file should be makes every write fail.
        path.mkdir()

        booking = uc.create_booking("Alice", "Pro Cleaning", "1 Main St")

        assert uc.get_booking(booking.id).status == BookingStatus.PENDING
        assert not path.with_suffix(".json.tmp").exists()
