from functools import lru_cache
import logging

from app.core.config import settings
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.provider_directory import ProviderDirectoryPort
from app.application.use_cases.auto_dispatch import AutoDispatchUseCase
from app.application.use_cases.booking_lifecycle import BookingLifecycleUseCase
from app.infrastructure.directory.static_directory import StaticProviderDirectory
from app.infrastructure.scheduler.dispatch_scheduler import DispatchScheduler
from app.infrastructure.store.json_store import JsonBookingStore
from app.infrastructure.store.memory_store import MemoryBookingStore


_booking_store: BookingStorePort | None = None
_lifecycle: BookingLifecycleUseCase | None = None
_dispatch: AutoDispatchUseCase | None = None
_scheduler: DispatchScheduler | None = None


def get_booking_store() -> BookingStorePort:
    global _booking_store
    if _booking_store is None:
        if settings.STORE_PROVIDER.lower() == "memory":
            _booking_store = MemoryBookingStore()
        else:
            _booking_store = JsonBookingStore(path=settings.STATE_FILE)
        logging.getLogger(__name__).info(
            "Using %s", type(_booking_store).__name__, extra={"reason": f"ENV={settings.ENV}"}
        )
    return _booking_store


@lru_cache
def get_provider_directory() -> ProviderDirectoryPort:
    return StaticProviderDirectory()


def get_lifecycle_use_case() -> BookingLifecycleUseCase:
    global _lifecycle
    if _lifecycle is None:
        _lifecycle = BookingLifecycleUseCase(
            store=get_booking_store(),
            directory=get_provider_directory(),
        )
    return _lifecycle


def get_dispatch_use_case() -> AutoDispatchUseCase:
    global _dispatch
    if _dispatch is None:
        _dispatch = AutoDispatchUseCase(
            lifecycle=get_lifecycle_use_case(),
            directory=get_provider_directory(),
            max_retries=settings.DISPATCH_MAX_RETRIES,
        )
    return _dispatch


def get_dispatch_scheduler() -> DispatchScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = DispatchScheduler(
            dispatch=get_dispatch_use_case(),
            interval_seconds=settings.DISPATCH_INTERVAL_SECONDS,
        )
    return _scheduler


def reset_container() -> None:
    """Drop cached singletons so the next call rebuilds them from settings."""
    global _booking_store, _lifecycle, _dispatch, _scheduler
    _booking_store = None
    _lifecycle = None
    _dispatch = None
    _scheduler = None
    get_provider_directory.cache_clear()


def get_container() -> dict[str, object]:
    return {
        "lifecycle": get_lifecycle_use_case(),
        "dispatch": get_dispatch_use_case(),
        "scheduler": get_dispatch_scheduler(),
        "directory": get_provider_directory(),
    }
