"""Sessions Service schemas package."""

from services.sessions_service.schemas.booking_types import (
    BookingTypeBase,
    BookingTypeCreate,
    BookingTypeResponse,
    BookingTypeUpdate,
)
from services.sessions_service.schemas.sessions import (
    PaymentRecord,
    ReminderRunResponse,
    SessionCreate,
    SessionFilters,
    SessionResponse,
    SessionStatsResponse,
    SessionUpdate,
)
from services.sessions_service.schemas.time_slots import (
    TimeSlotBase,
    TimeSlotCreate,
    TimeSlotFilters,
    TimeSlotResponse,
    TimeSlotUpdate,
)

__all__ = [
    "BookingTypeBase",
    "BookingTypeCreate",
    "BookingTypeResponse",
    "BookingTypeUpdate",
    "PaymentRecord",
    "ReminderRunResponse",
    "SessionCreate",
    "SessionFilters",
    "SessionResponse",
    "SessionStatsResponse",
    "SessionUpdate",
    "TimeSlotBase",
    "TimeSlotCreate",
    "TimeSlotFilters",
    "TimeSlotResponse",
    "TimeSlotUpdate",
]
