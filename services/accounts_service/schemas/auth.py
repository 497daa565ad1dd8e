from typing import Literal

from pydantic import BaseModel, EmailStr, Field
from services.accounts_service.schemas.account import AccountProfile, AccountResponse


class SignUpRequest(AccountProfile):
    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=8, max_length=128)
    # Admin accounts are never self-assigned.
    role: Literal["user", "coach"] = "user"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account: AccountResponse
