from __future__ import annotations

import logging

from app.application.exceptions import DispatchError
from app.application.ports.provider_directory import ProviderDirectoryPort
from app.application.use_cases.booking_lifecycle import BookingLifecycleUseCase
from app.application.utils.specialty import resolve_specialty
from app.domain.entities.booking import DISPATCHABLE_STATUSES, Booking
from app.domain.entities.provider import Provider

DEFAULT_MAX_RETRIES = 3


class AutoDispatchUseCase:
    def __init__(
        self,
        lifecycle: BookingLifecycleUseCase,
        directory: ProviderDirectoryPort,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        self._lifecycle = lifecycle
        self._directory = directory
        self._max_retries = max_retries
        self._logger = logging.getLogger(__name__)

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def is_eligible(self, booking: Booking) -> bool:
        return booking.status in DISPATCHABLE_STATUSES and booking.retry_count < self._max_retries

    def select_provider(self, specialty: str) -> Provider:
        """
        Three tiers: available specialist, then anyone available, then the
        directory's first provider even if unavailable.
        """
        provider = (
            self._directory.find_by_specialty(specialty)
            or self._directory.find_any_available()
            or self._directory.first()
        )
        if provider is None:
            raise DispatchError("Provider directory is empty")
        return provider

    def tick(self, now: float | None = None) -> list[Booking]:
        """Run one dispatch pass. Returns the bookings assigned during it."""
        assigned: list[Booking] = []
        for booking in self._lifecycle.list_bookings():
            if not self.is_eligible(booking):
                continue
            try:
                provider = self.select_provider(resolve_specialty(booking.service_type))
                updated = self._lifecycle.apply_auto_assignment(
                    booking.id, provider, self._max_retries, now=now
                )
            except Exception:
                self._logger.exception("Auto-assignment failed", extra={"booking_id": booking.id})
                continue
            if updated is None:
                continue
            assigned.append(updated)
            self._logger.info(
                "Booking auto-assigned",
                extra={
                    "booking_id": updated.id,
                    "provider_id": provider.id,
                    "attempt": updated.retry_count,
                },
            )
        return assigned
