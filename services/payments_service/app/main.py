"""FastAPI application for the Payments Service."""

from dotenv import load_dotenv
from fastapi import FastAPI

load_dotenv()

from libs.common.error_handler import add_exception_handlers  # noqa: E402
from services.payments_service.routers import discounts_router  # noqa: E402


def create_app() -> FastAPI:
    """Create and configure the Payments Service FastAPI app."""
    app = FastAPI(
        title="Courtside Payments Service",
        version="0.1.0",
        description="Discount codes for Courtside.",
    )
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "payments"}

    app.include_router(discounts_router)

    return app


app = create_app()
