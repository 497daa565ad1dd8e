import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import as_utc
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TimeSlotBase(BaseModel):
    date_time: datetime
    duration_min: int = Field(default=60, ge=15, le=480)

    @field_validator("date_time")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class TimeSlotCreate(TimeSlotBase):
    # Admins may create slots on behalf of a coach; ignored for coaches.
    coach_id: Optional[uuid.UUID] = None


class TimeSlotUpdate(BaseModel):
    date_time: Optional[datetime] = None
    duration_min: Optional[int] = Field(default=None, ge=15, le=480)
    is_available: Optional[bool] = None

    @field_validator("date_time", "duration_min", "is_available")
    @classmethod
    def _not_null(cls, value):
        # Omit a field to leave it unchanged; these columns are NOT NULL.
        if value is None:
            raise ValueError("may not be null")
        return value

    @field_validator("date_time")
    @classmethod
    def _normalize_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class TimeSlotFilters(BaseModel):
    coach_id: Optional[uuid.UUID] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalize_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class TimeSlotResponse(TimeSlotBase):
    id: uuid.UUID
    coach_id: uuid.UUID
    is_available: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
