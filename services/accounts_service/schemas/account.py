import uuid
from datetime import datetime
from typing import Optional

from libs.auth.models import Role
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class AccountProfile(BaseModel):
    """Editable profile attributes shared by create and update payloads."""

    gender: Optional[str] = Field(default=None, max_length=32)
    age: Optional[int] = Field(default=None, ge=0, le=130)
    height: Optional[float] = Field(default=None, gt=0)
    weight: Optional[float] = Field(default=None, gt=0)
    disability: Optional[bool] = None
    disability_cause: Optional[str] = None
    country: Optional[str] = Field(default=None, max_length=100)
    address: Optional[str] = None
    notes: Optional[str] = None
    bio: Optional[str] = None
    credentials: Optional[str] = None
    philosophy: Optional[str] = None
    profile_image: Optional[str] = None


class AccountCreate(AccountProfile):
    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=8, max_length=128)
    role: Role = Role.USER


class AccountUpdate(AccountProfile):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)

    @field_validator("name", "disability")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class RoleUpdate(BaseModel):
    role: Role


class AccountResponse(BaseModel):
    id: uuid.UUID
    email: EmailStr
    name: str
    role: Role
    gender: Optional[str] = None
    age: Optional[int] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    disability: bool = False
    disability_cause: Optional[str] = None
    country: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    bio: Optional[str] = None
    credentials: Optional[str] = None
    philosophy: Optional[str] = None
    profile_image: Optional[str] = None
    is_active: bool
    is_online: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CoachResponse(BaseModel):
    """Public coach card; no client-side health data."""

    id: uuid.UUID
    name: str
    bio: Optional[str] = None
    credentials: Optional[str] = None
    philosophy: Optional[str] = None
    profile_image: Optional[str] = None
    country: Optional[str] = None
    is_online: bool = False

    model_config = ConfigDict(from_attributes=True)
