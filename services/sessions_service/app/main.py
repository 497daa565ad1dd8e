"""FastAPI application for the Sessions Service."""

from dotenv import load_dotenv
from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

load_dotenv()

from libs.common.error_handler import add_exception_handlers  # noqa: E402
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler  # noqa: E402
from services.sessions_service.routers import (  # noqa: E402
    booking_types_router,
    sessions_router,
    time_slots_router,
)


def create_app() -> FastAPI:
    """Create and configure the Sessions Service FastAPI app."""
    app = FastAPI(
        title="Courtside Sessions Service",
        version="0.1.0",
        description="Time slots, booking types and session booking for Courtside.",
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "sessions"}

    app.include_router(time_slots_router)
    app.include_router(booking_types_router)
    app.include_router(sessions_router)

    return app


app = create_app()
