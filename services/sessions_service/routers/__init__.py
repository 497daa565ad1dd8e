"""Sessions service routers."""

from services.sessions_service.routers.booking_types import (
    router as booking_types_router,
)
from services.sessions_service.routers.sessions import router as sessions_router
from services.sessions_service.routers.time_slots import router as time_slots_router

__all__ = [
    "booking_types_router",
    "sessions_router",
    "time_slots_router",
]
