"""Payments service routers."""

from services.payments_service.routers.discounts import router as discounts_router

__all__ = [
    "discounts_router",
]
