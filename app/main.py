import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from app.api.v1.bookings import router as bookings_router
from app.core.config import settings
from app.infrastructure.scheduler.dispatch_scheduler import DispatchScheduler
from app.wiring.dependencies import get_dispatch_scheduler, get_lifecycle_use_case

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("booking_id", "status", "actor", "provider_id", "attempt", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Restore the snapshot before serving requests.
    get_lifecycle_use_case()
    scheduler = get_dispatch_scheduler()
    if settings.AUTO_DISPATCH_ENABLED:
        scheduler.start()
    try:
        yield
    finally:
        await scheduler.stop()


app = FastAPI(title="BookMyHelper Dispatch", version="1.0.0", lifespan=lifespan)

app.include_router(bookings_router, prefix="/api/v1", tags=["bookings"])


@app.get("/health")
def health(scheduler: DispatchScheduler = Depends(get_dispatch_scheduler)) -> dict[str, object]:
    return {"status": "ok", "dispatch_running": scheduler.is_running}
