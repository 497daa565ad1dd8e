"""Enum helpers for the Accounts Service models."""

from libs.auth.models import Role  # noqa: F401


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]
