"""Accounts Service models package.

Re-exports models and enums so ``from services.accounts_service.models import
Account`` works and the mapper registry sees every class on import.
"""

from services.accounts_service.models.account import Account  # noqa: F401
from services.accounts_service.models.enums import Role, enum_values  # noqa: F401

__all__ = [
    "Account",
    "Role",
    "enum_values",
]
