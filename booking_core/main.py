import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from booking_core.api.v1.bookings import router as bookings_router
from booking_core.api.v1.catalog import router as catalog_router
from booking_core.core.config import settings
from booking_core.wiring.dependencies import get_event_publisher


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("booking_id", "staff_id", "date", "start_time", "status", "event", "attempt", "reason", "payload"):
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
    yield
    # Only close a publisher that was actually built.
    if get_event_publisher.cache_info().currsize:
        get_event_publisher().close()


app = FastAPI(title=settings.APP_NAME, version="1.0.0", lifespan=lifespan)

app.include_router(catalog_router, prefix="/api/v1", tags=["catalog"])
app.include_router(bookings_router, prefix="/api/v1", tags=["bookings"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
