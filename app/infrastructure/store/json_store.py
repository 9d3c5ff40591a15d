from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.booking import Booking, BookingStatus, LifecycleEvent

SNAPSHOT_VERSION = 1

logger = logging.getLogger(__name__)


class MalformedRecordError(ValueError):
    pass


class JsonBookingStore(BookingStorePort):
    """Keeps the whole booking state in one JSON document."""

    def __init__(self, path: str = "./data/bmh_state.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> tuple[list[Booking], list[LifecycleEvent]]:
        if not self._path.exists():
            return [], []

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (ValueError, RecursionError, OSError) as e:
            logger.warning("Booking snapshot unreadable, starting empty", extra={"reason": str(e)})
            return [], []

        if not isinstance(data, dict):
            logger.warning("Booking snapshot has unexpected shape, starting empty")
            return [], []

        raw_bookings = data.get("bookings")
        raw_history = data.get("globalHistory")
        bookings = self._load_bookings(raw_bookings if isinstance(raw_bookings, list) else [])
        history = self._load_events(raw_history if isinstance(raw_history, list) else [])
        return bookings, history

    def save(self, bookings: list[Booking], audit_log: list[LifecycleEvent]) -> None:
        data = {
            "version": SNAPSHOT_VERSION,
            "bookings": [self._serialize_booking(b) for b in bookings],
            "globalHistory": [self._serialize_event(e) for e in audit_log],
        }
        self._write_atomic(data)

    def _write_atomic(self, data: dict[str, Any]) -> None:
        """Write to a temp file, then rename over the snapshot."""
        temp_path = self._path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except Exception:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass
            raise

    def _load_bookings(self, raw: list[Any]) -> list[Booking]:
        bookings: list[Booking] = []
        for item in raw:
            try:
                bookings.append(self._deserialize_booking(item))
            except MalformedRecordError as e:
                logger.warning("Skipping malformed booking record", extra={"reason": str(e)})
        return bookings

    def _load_events(self, raw: list[Any]) -> list[LifecycleEvent]:
        events: list[LifecycleEvent] = []
        for item in raw:
            try:
                events.append(self._deserialize_event(item))
            except MalformedRecordError as e:
                logger.warning("Skipping malformed audit event", extra={"reason": str(e)})
        return events

    def _serialize_booking(self, booking: Booking) -> dict[str, Any]:
        return {
            "id": booking.id,
            "customer_name": booking.customer_name,
            "service_type": booking.service_type,
            "address": booking.address,
            "status": booking.status.value,
            "created_at": booking.created_at,
            "provider_id": booking.provider_id,
            "provider_name": booking.provider_name,
            "retry_count": booking.retry_count,
            "last_retry_at": booking.last_retry_at,
            "history": [self._serialize_event(e) for e in booking.history],
        }

    def _serialize_event(self, event: LifecycleEvent) -> dict[str, Any]:
        return {
            "id": event.id,
            "booking_id": event.booking_id,
            "timestamp": event.timestamp,
            "from_status": event.from_status,
            "to_status": event.to_status,
            "actor": event.actor,
            "notes": event.notes,
        }

    def _deserialize_booking(self, data: Any) -> Booking:
        if not isinstance(data, dict):
            raise MalformedRecordError("booking is not an object")

        booking_id = _require_str(data, "id")
        status_raw = _require_str(data, "status")
        try:
            status = BookingStatus(status_raw)
        except ValueError:
            raise MalformedRecordError(f"unknown status {status_raw!r}") from None

        raw_history = data.get("history")
        if not isinstance(raw_history, list) or not raw_history:
            raise MalformedRecordError(f"booking {booking_id} has no history")
        history = tuple(self._deserialize_event(e, booking_id=booking_id) for e in raw_history)
        if not all(a.timestamp < b.timestamp for a, b in zip(history, history[1:])):
            raise MalformedRecordError(f"booking {booking_id} history is not in chronological order")
        if history[-1].to_status != status.value:
            raise MalformedRecordError(f"booking {booking_id} history does not end in {status.value}")

        retry_count = data.get("retry_count", 0)
        if retry_count is None:
            retry_count = 0
        if not isinstance(retry_count, int) or isinstance(retry_count, bool) or retry_count < 0:
            raise MalformedRecordError(f"booking {booking_id} has invalid retry_count")

        return Booking(
            id=booking_id,
            customer_name=_require_str(data, "customer_name"),
            service_type=_require_str(data, "service_type"),
            address=_require_str(data, "address"),
            status=status,
            created_at=_require_number(data, "created_at"),
            provider_id=_optional_str(data, "provider_id"),
            provider_name=_optional_str(data, "provider_name"),
            retry_count=retry_count,
            last_retry_at=_optional_number(data, "last_retry_at"),
            history=history,
        )

    def _deserialize_event(self, data: Any, booking_id: str | None = None) -> LifecycleEvent:
        if not isinstance(data, dict):
            raise MalformedRecordError("event is not an object")
        return LifecycleEvent(
            id=_require_str(data, "id"),
            booking_id=_optional_str(data, "booking_id") or booking_id or "",
            timestamp=_require_number(data, "timestamp"),
            from_status=_require_str(data, "from_status"),
            to_status=_require_str(data, "to_status"),
            actor=_optional_str(data, "actor") or "",
            notes=_optional_str(data, "notes") or "",
        )


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise MalformedRecordError(f"field {key!r} must be a string")
    return value


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedRecordError(f"field {key!r} must be a string or null")
    return value


def _require_number(data: dict[str, Any], key: str) -> float:
    value = _optional_number(data, key)
    if value is None:
        raise MalformedRecordError(f"field {key!r} is required")
    return value


def _optional_number(data: dict[str, Any], key: str) -> float | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedRecordError(f"field {key!r} must be a number")
    return float(value)
