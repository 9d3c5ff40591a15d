from __future__ import annotations

from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.booking import Booking, LifecycleEvent


class MemoryBookingStore(BookingStorePort):
    def __init__(self) -> None:
        self._bookings: list[Booking] = []
        self._audit_log: list[LifecycleEvent] = []
        self.save_count = 0

    def load(self) -> tuple[list[Booking], list[LifecycleEvent]]:
        return list(self._bookings), list(self._audit_log)

    def save(self, bookings: list[Booking], audit_log: list[LifecycleEvent]) -> None:
        # Booking values are frozen; copying the lists is enough.
        self._bookings = list(bookings)
        self._audit_log = list(audit_log)
        self.save_count += 1
