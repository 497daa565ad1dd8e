"""Accounts service routers."""

from services.accounts_service.routers.accounts import router as accounts_router
from services.accounts_service.routers.auth import router as auth_router
from services.accounts_service.routers.coaches import router as coaches_router

__all__ = [
    "accounts_router",
    "auth_router",
    "coaches_router",
]
