from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"


# from_status of the synthetic creation event
START_STATUS = "START"

DISPATCHABLE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.REJECTED})
CLOSED_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})


@dataclass(frozen=True)
class LifecycleEvent:
    id: str
    booking_id: str
    timestamp: float
    from_status: str
    to_status: str
    actor: str
    notes: str


@dataclass(frozen=True)
class Booking:
    id: str
    customer_name: str
    service_type: str
    address: str
    status: BookingStatus
    created_at: float
    provider_id: str | None = None
    provider_name: str | None = None
    retry_count: int = 0
    last_retry_at: float | None = None
    history: tuple[LifecycleEvent, ...] = ()

    @property
    def is_active(self) -> bool:
        return self.status not in CLOSED_STATUSES


@dataclass(frozen=True)
class BookingStats:
    total: int
    active: int
    rejected: int
    pending: int
