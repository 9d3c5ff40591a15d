from pydantic import BaseModel, Field

from app.domain.entities.booking import Booking, BookingStats, BookingStatus, LifecycleEvent
from app.domain.entities.provider import Provider


class CreateBookingSchema(BaseModel):
    customer_name: str = Field(min_length=1)
    service_type: str = Field(min_length=1)
    address: str = Field(min_length=1)


class TransitionRequestSchema(BaseModel):
    status: BookingStatus
    actor: str = Field(min_length=1)
    provider_id: str | None = None


class LifecycleEventSchema(BaseModel):
    id: str
    booking_id: str
    timestamp: float
    from_status: str
    to_status: str
    actor: str
    notes: str

    @classmethod
    def from_entity(cls, event: LifecycleEvent) -> "LifecycleEventSchema":
        return cls(
            id=event.id,
            booking_id=event.booking_id,
            timestamp=event.timestamp,
            from_status=event.from_status,
            to_status=event.to_status,
            actor=event.actor,
            notes=event.notes,
        )


class BookingSchema(BaseModel):
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
    history: list[LifecycleEventSchema] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, booking: Booking) -> "BookingSchema":
        return cls(
            id=booking.id,
            customer_name=booking.customer_name,
            service_type=booking.service_type,
            address=booking.address,
            status=booking.status,
            created_at=booking.created_at,
            provider_id=booking.provider_id,
            provider_name=booking.provider_name,
            retry_count=booking.retry_count,
            last_retry_at=booking.last_retry_at,
            history=[LifecycleEventSchema.from_entity(e) for e in booking.history],
        )


class ProviderSchema(BaseModel):
    id: str
    name: str
    specialty: str
    is_available: bool

    @classmethod
    def from_entity(cls, provider: Provider) -> "ProviderSchema":
        return cls(
            id=provider.id,
            name=provider.name,
            specialty=provider.specialty.value,
            is_available=provider.is_available,
        )


class StatsSchema(BaseModel):
    total: int
    active: int
    rejected: int
    pending: int

    @classmethod
    def from_entity(cls, stats: BookingStats) -> "StatsSchema":
        return cls(total=stats.total, active=stats.active, rejected=stats.rejected, pending=stats.pending)


class DispatchTickSchema(BaseModel):
    assigned: list[BookingSchema]
