import uuid
from datetime import datetime
from typing import Optional

from libs.common.currency import Money
from libs.common.datetime_utils import as_utc
from pydantic import BaseModel, ConfigDict, Field, field_validator
from services.sessions_service.models import SessionStatus


class SessionCreate(BaseModel):
    booking_type_id: uuid.UUID
    time_slot_id: uuid.UUID
    notes: Optional[str] = None
    discount_code: Optional[str] = Field(default=None, max_length=50)


class SessionUpdate(BaseModel):
    """Partial update. Clients may only touch ``notes``."""

    notes: Optional[str] = None
    status: Optional[SessionStatus] = None
    is_paid: Optional[bool] = None
    payment_id: Optional[str] = None

    @field_validator("status", "is_paid")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class SessionFilters(BaseModel):
    status: Optional[SessionStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalize_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class SessionResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    coach_id: uuid.UUID
    booking_type_id: uuid.UUID
    time_slot_id: uuid.UUID
    discount_id: Optional[uuid.UUID] = None
    date_time: datetime
    duration_min: int
    status: SessionStatus
    price: Money
    is_paid: bool
    payment_id: Optional[str] = None
    discount_code: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("date_time")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class SessionStatsResponse(BaseModel):
    total: int
    upcoming: int
    by_status: dict[SessionStatus, int]
    completed_revenue: Money


class ReminderRunResponse(BaseModel):
    reminded: int


class PaymentRecord(BaseModel):
    """Payment confirmation reported by the payments integration."""

    payment_id: str = Field(min_length=1, max_length=255)
