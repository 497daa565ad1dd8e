"""Accounts Service schemas package."""

from services.accounts_service.schemas.account import (
    AccountCreate,
    AccountProfile,
    AccountResponse,
    AccountUpdate,
    CoachResponse,
    RoleUpdate,
)
from services.accounts_service.schemas.auth import (
    LoginRequest,
    SignUpRequest,
    TokenResponse,
)

__all__ = [
    "AccountCreate",
    "AccountProfile",
    "AccountResponse",
    "AccountUpdate",
    "CoachResponse",
    "LoginRequest",
    "RoleUpdate",
    "SignUpRequest",
    "TokenResponse",
]
