import enum
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Role(str, enum.Enum):
    USER = "user"
    PREMIUM_USER = "premium_user"
    COACH = "coach"
    ADMIN = "admin"


CLIENT_ROLES = frozenset({Role.USER, Role.PREMIUM_USER})
COACH_ROLES = frozenset({Role.COACH, Role.ADMIN})


class AuthUser(BaseModel):
    """
    The authenticated caller, decoded from the bearer token.
    """

    user_id: uuid.UUID = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: Role = Role.USER

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_coach(self) -> bool:
        return self.role in COACH_ROLES

    @property
    def is_client(self) -> bool:
        return self.role in CLIENT_ROLES
