"""FastAPI application for the Communications Service."""

from dotenv import load_dotenv
from fastapi import FastAPI

load_dotenv()

from libs.common.error_handler import add_exception_handlers  # noqa: E402
from services.communications_service.routers import (  # noqa: E402
    notifications_router,
)


def create_app() -> FastAPI:
    """Create and configure the Communications Service FastAPI app."""
    app = FastAPI(
        title="Courtside Communications Service",
        version="0.1.0",
        description="In-app notifications for Courtside.",
    )
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "communications"}

    app.include_router(notifications_router)

    return app


app = create_app()
