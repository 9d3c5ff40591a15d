from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.booking import Booking, LifecycleEvent


class BookingStorePort(ABC):
    @abstractmethod
    def load(self) -> tuple[list[Booking], list[LifecycleEvent]]:
        """
        Load the last snapshot as (bookings, audit_log).
        Must not raise: missing or malformed state yields ([], []).
        """
        raise NotImplementedError

    @abstractmethod
    def save(self, bookings: list[Booking], audit_log: list[LifecycleEvent]) -> None:
        """
        Persist a full snapshot. Bookings newest first, audit log most-recent-first.
        """
        raise NotImplementedError
