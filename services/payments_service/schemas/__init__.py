"""Payments Service schemas."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.currency import Money
from libs.common.datetime_utils import as_utc
from pydantic import BaseModel, ConfigDict, Field, field_validator


class DiscountBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    amount: Money
    expiry: datetime
    max_usage: int = Field(default=1, ge=1)

    @field_validator("expiry")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class DiscountCreate(DiscountBase):
    coach_id: Optional[uuid.UUID] = None  # admin only


class DiscountUpdate(BaseModel):
    amount: Optional[Money] = None
    expiry: Optional[datetime] = None
    max_usage: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = None

    @field_validator("amount", "expiry", "max_usage", "is_active")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    @field_validator("expiry")
    @classmethod
    def _normalize_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class DiscountResponse(DiscountBase):
    id: uuid.UUID
    coach_id: uuid.UUID
    use_count: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DiscountValidationResponse(BaseModel):
    """Outcome of checking a code before booking."""

    code: str
    amount: Money
    coach_id: uuid.UUID
    remaining_uses: int
    expiry: datetime

    @field_validator("expiry")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return as_utc(value)
