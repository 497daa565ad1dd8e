"""FastAPI application entrypoint for the Courtside API.

Composes every service router into one deployable app.
"""

from __future__ import annotations

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

load_dotenv()

from libs.common.config import get_settings  # noqa: E402
from libs.common.error_handler import add_exception_handlers  # noqa: E402
from libs.common.middleware import add_observability_middleware  # noqa: E402
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler  # noqa: E402
from services.accounts_service.routers import (  # noqa: E402
    accounts_router,
    auth_router,
    coaches_router,
)
from services.communications_service.routers import (  # noqa: E402
    notifications_router,
)
from services.payments_service.routers import discounts_router  # noqa: E402
from services.sessions_service.routers import (  # noqa: E402
    booking_types_router,
    sessions_router,
    time_slots_router,
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()
    app = FastAPI(
        title="Courtside API",
        version="0.1.0",
        description="Coaching platform backend: accounts, availability and bookings.",
    )

    # Add rate limiter state to app
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Structured logging + request tracing
    add_observability_middleware(app)

    # Consistent {"detail", "code"} error bodies
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple readiness endpoint."""
        return {"status": "ok"}

    # ==================================================================
    # ACCOUNTS
    # ==================================================================
    app.include_router(auth_router)
    app.include_router(accounts_router)
    app.include_router(coaches_router)

    # ==================================================================
    # SESSIONS
    # ==================================================================
    app.include_router(time_slots_router)
    app.include_router(booking_types_router)
    app.include_router(sessions_router)

    # ==================================================================
    # PAYMENTS & COMMUNICATIONS
    # ==================================================================
    app.include_router(discounts_router)
    app.include_router(notifications_router)

    return app


app = create_app()
