"""
Booking lifecycle transitions as pure functions.

Every transition is accepted: the target status is recorded as requested and
the provider fields are derived from it. Guarding which buttons are offered in
which state is left to the caller.
"""

from __future__ import annotations

from dataclasses import replace

from app.domain.entities.booking import Booking, BookingStatus, LifecycleEvent, START_STATUS
from app.domain.entities.provider import Provider

SYSTEM_ACTOR = "System"
ADMIN_ACTOR = "Admin"

CREATED_NOTES = "Booking created by customer."


def new_booking(
    booking_id: str,
    event_id: str,
    customer_name: str,
    service_type: str,
    address: str,
    timestamp: float,
) -> Booking:
    """Build a PENDING booking seeded with its creation event."""
    event = LifecycleEvent(
        id=event_id,
        booking_id=booking_id,
        timestamp=timestamp,
        from_status=START_STATUS,
        to_status=BookingStatus.PENDING.value,
        actor=customer_name,
        notes=CREATED_NOTES,
    )
    return Booking(
        id=booking_id,
        customer_name=customer_name,
        service_type=service_type,
        address=address,
        status=BookingStatus.PENDING,
        created_at=timestamp,
        history=(event,),
    )


def apply_transition(
    booking: Booking,
    new_status: BookingStatus,
    actor: str,
    *,
    event_id: str,
    timestamp: float,
    provider: Provider | None = None,
    notes: str | None = None,
) -> tuple[Booking, LifecycleEvent]:
    new_status = BookingStatus(new_status)
    event = LifecycleEvent(
        id=event_id,
        booking_id=booking.id,
        timestamp=timestamp,
        from_status=booking.status.value,
        to_status=new_status.value,
        actor=actor,
        notes=notes or f"Status changed to {new_status.value}",
    )

    provider_id = booking.provider_id
    provider_name = booking.provider_name
    if new_status == BookingStatus.ASSIGNED and provider is not None:
        provider_id = provider.id
        provider_name = provider.name
    elif new_status == BookingStatus.PENDING:
        provider_id = None
        provider_name = None

    updated = replace(
        booking,
        status=new_status,
        provider_id=provider_id,
        provider_name=provider_name,
        history=booking.history + (event,),
    )
    return updated, event


def apply_auto_assignment(
    booking: Booking,
    provider: Provider,
    *,
    event_id: str,
    timestamp: float,
) -> tuple[Booking, LifecycleEvent]:
    """Assign on behalf of the dispatcher and count the attempt."""
    attempt = booking.retry_count + 1
    updated, event = apply_transition(
        booking,
        BookingStatus.ASSIGNED,
        SYSTEM_ACTOR,
        event_id=event_id,
        timestamp=timestamp,
        provider=provider,
        notes=f"Auto-assigned to {provider.name} (Attempt {attempt})",
    )
    return replace(updated, retry_count=attempt, last_retry_at=timestamp), event
