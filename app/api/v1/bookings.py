from fastapi import APIRouter, Depends, HTTPException, Query, Response

from app.api.v1.schemas import (
    BookingSchema,
    CreateBookingSchema,
    DispatchTickSchema,
    LifecycleEventSchema,
    ProviderSchema,
    StatsSchema,
    TransitionRequestSchema,
)
from app.application.exceptions import NotFoundError
from app.application.ports.provider_directory import ProviderDirectoryPort
from app.application.use_cases.auto_dispatch import AutoDispatchUseCase
from app.application.use_cases.booking_lifecycle import BookingLifecycleUseCase
from app.domain.entities.booking import BookingStatus
from app.wiring.dependencies import (
    get_dispatch_use_case,
    get_lifecycle_use_case,
    get_provider_directory,
)

router = APIRouter()


@router.post("/bookings", response_model=BookingSchema, status_code=201)
def create_booking(
    req: CreateBookingSchema,
    uc: BookingLifecycleUseCase = Depends(get_lifecycle_use_case),
):
    booking = uc.create_booking(req.customer_name, req.service_type, req.address)
    return BookingSchema.from_entity(booking)


@router.get("/bookings", response_model=list[BookingSchema])
def list_bookings(
    provider_id: str | None = Query(None),
    status: BookingStatus | None = Query(None),
    uc: BookingLifecycleUseCase = Depends(get_lifecycle_use_case),
):
    return [BookingSchema.from_entity(b) for b in uc.list_bookings(provider_id=provider_id, status=status)]


@router.delete("/bookings", status_code=204)
def clear_all(uc: BookingLifecycleUseCase = Depends(get_lifecycle_use_case)) -> Response:
    uc.clear_all()
    return Response(status_code=204)


@router.get("/bookings/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: str,
    uc: BookingLifecycleUseCase = Depends(get_lifecycle_use_case),
):
    try:
        return BookingSchema.from_entity(uc.get_booking(booking_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/bookings/{booking_id}/status", response_model=BookingSchema)
def transition_booking(
    booking_id: str,
    req: TransitionRequestSchema,
    uc: BookingLifecycleUseCase = Depends(get_lifecycle_use_case),
):
    try:
        booking = uc.transition(booking_id, req.status, req.actor, provider_id=req.provider_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return BookingSchema.from_entity(booking)


@router.get("/audit-log", response_model=list[LifecycleEventSchema])
def audit_log(
    limit: int | None = Query(None, ge=0),
    booking_id: str | None = Query(None),
    uc: BookingLifecycleUseCase = Depends(get_lifecycle_use_case),
):
    return [LifecycleEventSchema.from_entity(e) for e in uc.get_audit_log(limit=limit, booking_id=booking_id)]


@router.get("/stats", response_model=StatsSchema)
def stats(uc: BookingLifecycleUseCase = Depends(get_lifecycle_use_case)):
    return StatsSchema.from_entity(uc.get_stats())


@router.get("/providers", response_model=list[ProviderSchema])
def providers(directory: ProviderDirectoryPort = Depends(get_provider_directory)):
    return [ProviderSchema.from_entity(p) for p in directory.list_providers()]


@router.post("/dispatch/tick", response_model=DispatchTickSchema)
def dispatch_tick(dispatch: AutoDispatchUseCase = Depends(get_dispatch_use_case)):
    assigned = dispatch.tick()
    return DispatchTickSchema(assigned=[BookingSchema.from_entity(b) for b in assigned])
