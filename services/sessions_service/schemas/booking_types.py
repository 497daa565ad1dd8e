import uuid
from datetime import datetime
from typing import Optional

from libs.common.currency import Money
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookingTypeBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    base_price: Money


class BookingTypeCreate(BookingTypeBase):
    coach_id: Optional[uuid.UUID] = None  # admin only


class BookingTypeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    base_price: Optional[Money] = None
    is_active: Optional[bool] = None

    @field_validator("name", "base_price", "is_active")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class BookingTypeResponse(BookingTypeBase):
    id: uuid.UUID
    coach_id: uuid.UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
