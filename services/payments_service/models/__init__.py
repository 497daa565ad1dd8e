"""Payments Service models package."""

from services.payments_service.models.core import Discount  # noqa: F401

__all__ = [
    "Discount",
]
