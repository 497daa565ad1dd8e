"""Communications service routers."""

from services.communications_service.routers.notifications import (
    router as notifications_router,
)

__all__ = [
    "notifications_router",
]
