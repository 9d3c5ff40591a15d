from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable
from uuid import uuid4

from app.application.exceptions import BookingNotFoundError
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.provider_directory import ProviderDirectoryPort
from app.application.utils.lifecycle import apply_auto_assignment, apply_transition, new_booking
from app.domain.entities.booking import (
    DISPATCHABLE_STATUSES,
    Booking,
    BookingStats,
    BookingStatus,
    LifecycleEvent,
)
from app.domain.entities.provider import Provider


def _new_id() -> str:
    return uuid4().hex


class BookingLifecycleUseCase:
    """
    Single owner of the booking store and the global audit log.

    All reads and writes go through one re-entrant lock, so manual transitions,
    dispatch attempts and bulk clears are totally ordered. Every mutation is
    followed by a best-effort snapshot write through the store port.
    """

    def __init__(
        self,
        store: BookingStorePort,
        directory: ProviderDirectoryPort,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._store = store
        self._directory = directory
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.RLock()
        self._write_lock = threading.Lock()
        self._snapshot_seq = 0
        self._written_seq = 0
        self._logger = logging.getLogger(__name__)

        # Insertion order is creation order; listings reverse it.
        self._bookings: dict[str, Booking] = {}
        # Most recent first.
        self._audit_log: deque[LifecycleEvent] = deque()
        self._last_timestamp: float | None = None

        self._restore()

    def _restore(self) -> None:
        bookings, audit_log = self._store.load()
        for booking in reversed(bookings):
            self._bookings[booking.id] = booking
        self._audit_log.extend(audit_log)

        timestamps = [event.timestamp for event in audit_log]
        timestamps.extend(event.timestamp for booking in bookings for event in booking.history)
        self._last_timestamp = max(timestamps) if timestamps else None
        self._logger.info(
            "Booking state restored",
            extra={"reason": f"bookings={len(self._bookings)} events={len(self._audit_log)}"},
        )

    def _next_timestamp(self, now: float | None = None) -> float:
        """Issue a strictly increasing event timestamp."""
        ts = self._clock() if now is None else now
        if self._last_timestamp is not None and ts <= self._last_timestamp:
            ts = self._last_timestamp + 1e-6
        self._last_timestamp = ts
        return ts

    def _require(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    def _commit(self, booking: Booking, event: LifecycleEvent) -> None:
        self._bookings[booking.id] = booking
        self._audit_log.appendleft(event)

    def create_booking(self, customer_name: str, service_type: str, address: str) -> Booking:
        """Required-field checks belong to the caller; values are stored as given."""
        with self._lock:
            booking = new_booking(
                booking_id=self._id_factory(),
                event_id=self._id_factory(),
                customer_name=customer_name,
                service_type=service_type,
                address=address,
                timestamp=self._next_timestamp(),
            )
            self._commit(booking, booking.history[0])
            snapshot = self._snapshot_locked()

        self._logger.info(
            "Booking created",
            extra={"booking_id": booking.id, "status": booking.status.value, "actor": customer_name},
        )
        self._write_snapshot(*snapshot)
        return booking

    def transition(
        self,
        booking_id: str,
        new_status: BookingStatus | str,
        actor: str,
        provider_id: str | None = None,
    ) -> Booking:
        """
        Record a manual status change. Any target status is accepted.
        On ASSIGNED the provider is the explicit provider_id, else the provider
        named by the actor, else the directory's default provider.
        """
        new_status = BookingStatus(new_status)
        with self._lock:
            booking = self._require(booking_id)
            provider = None
            if new_status == BookingStatus.ASSIGNED:
                provider = self._resolve_assignee(actor, provider_id)
            updated, event = apply_transition(
                booking,
                new_status,
                actor,
                event_id=self._id_factory(),
                timestamp=self._next_timestamp(),
                provider=provider,
            )
            self._commit(updated, event)
            snapshot = self._snapshot_locked()

        self._logger.info(
            "Booking status changed",
            extra={
                "booking_id": booking_id,
                "status": f"{event.from_status}->{event.to_status}",
                "actor": actor,
                "provider_id": updated.provider_id,
            },
        )
        self._write_snapshot(*snapshot)
        return updated

    def _resolve_assignee(self, actor: str, provider_id: str | None) -> Provider | None:
        if provider_id:
            return self._directory.get(provider_id)
        return self._directory.find_by_name(actor) or self._directory.first()

    def apply_auto_assignment(
        self,
        booking_id: str,
        provider: Provider,
        max_retries: int,
        now: float | None = None,
    ) -> Booking | None:
        """
        Assign on behalf of the dispatcher. Returns None without mutating when
        the booking is gone or no longer eligible by the time the lock is held.
        """
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                return None
            if booking.status not in DISPATCHABLE_STATUSES or booking.retry_count >= max_retries:
                return None
            updated, event = apply_auto_assignment(
                booking,
                provider,
                event_id=self._id_factory(),
                timestamp=self._next_timestamp(now),
            )
            self._commit(updated, event)
            snapshot = self._snapshot_locked()

        self._write_snapshot(*snapshot)
        return updated

    def clear_all(self) -> None:
        with self._lock:
            removed = len(self._bookings)
            self._bookings.clear()
            self._audit_log.clear()
            snapshot = self._snapshot_locked()

        self._logger.warning("All bookings cleared", extra={"reason": f"removed={removed}"})
        self._write_snapshot(*snapshot)

    def get_booking(self, booking_id: str) -> Booking:
        with self._lock:
            return self._require(booking_id)

    def list_bookings(
        self,
        provider_id: str | None = None,
        status: BookingStatus | str | None = None,
    ) -> list[Booking]:
        """
        Newest first. With provider_id, returns what that provider can see:
        every PENDING booking plus the ones assigned to them.
        """
        with self._lock:
            bookings = list(reversed(self._bookings.values()))
        if provider_id is not None:
            bookings = [
                b for b in bookings if b.status == BookingStatus.PENDING or b.provider_id == provider_id
            ]
        if status is not None:
            wanted = BookingStatus(status)
            bookings = [b for b in bookings if b.status == wanted]
        return bookings

    def get_audit_log(self, limit: int | None = None, booking_id: str | None = None) -> list[LifecycleEvent]:
        with self._lock:
            events = list(self._audit_log)
        if booking_id is not None:
            events = [e for e in events if e.booking_id == booking_id]
        if limit is not None:
            events = events[: max(limit, 0)]
        return events

    def get_stats(self) -> BookingStats:
        with self._lock:
            bookings = list(self._bookings.values())
        return BookingStats(
            total=len(bookings),
            active=sum(1 for b in bookings if b.is_active),
            rejected=sum(1 for b in bookings if b.status == BookingStatus.REJECTED),
            pending=sum(1 for b in bookings if b.status == BookingStatus.PENDING),
        )

    def _snapshot_locked(self) -> tuple[int, list[Booking], list[LifecycleEvent]]:
        self._snapshot_seq += 1
        return self._snapshot_seq, list(reversed(self._bookings.values())), list(self._audit_log)

    def _write_snapshot(self, seq: int, bookings: list[Booking], audit_log: list[LifecycleEvent]) -> None:
        with self._write_lock:
            # A newer snapshot was already written or attempted; this one would roll it back.
            if seq <= self._written_seq:
                return
            # Claimed before saving: a failed write still outranks older snapshots.
            self._written_seq = seq
            try:
                self._store.save(bookings, audit_log)
            except Exception as e:
                self._logger.warning("Snapshot write failed", extra={"reason": str(e)})
