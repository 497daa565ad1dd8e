"""Sessions Service models package.

Re-exports all models and enums so that:
  - ``from services.sessions_service.models import Session`` works
  - Alembic env.py sees every table on import
"""

from services.sessions_service.models.core import (  # noqa: F401
    BookingType,
    Session,
    TimeSlot,
)
from services.sessions_service.models.enums import (  # noqa: F401
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    SessionStatus,
    enum_values,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "BookingType",
    "Session",
    "SessionStatus",
    "TERMINAL_STATUSES",
    "TimeSlot",
    "enum_values",
]
