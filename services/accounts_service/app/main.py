"""FastAPI application for the Accounts Service."""

from dotenv import load_dotenv
from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

load_dotenv()

from libs.common.error_handler import add_exception_handlers  # noqa: E402
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler  # noqa: E402
from services.accounts_service.routers import (  # noqa: E402
    accounts_router,
    auth_router,
    coaches_router,
)


def create_app() -> FastAPI:
    """Create and configure the Accounts Service FastAPI app."""
    app = FastAPI(
        title="Courtside Accounts Service",
        version="0.1.0",
        description="Accounts, authentication and coach directory for Courtside.",
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "accounts"}

    app.include_router(auth_router)
    app.include_router(accounts_router)
    app.include_router(coaches_router)

    return app


app = create_app()
