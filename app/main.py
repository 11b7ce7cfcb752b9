from fastapi import FastAPI

from app.api.v1.bookings import router as bookings_router
from app.api.v1.dashboard import router as dashboard_router
from app.api.v1.schedules import router as schedules_router
from app.api.v1.services import router as services_router
from app.core.config import settings
from app.core.logging_config import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Store Booking Availability", version="1.0.0")

app.include_router(schedules_router, prefix="/api/v1", tags=["schedule"])
app.include_router(bookings_router, prefix="/api/v1", tags=["bookings"])
app.include_router(services_router, prefix="/api/v1", tags=["services"])
app.include_router(dashboard_router, prefix="/api/v1", tags=["dashboard"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
