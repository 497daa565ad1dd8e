"""Issue and decode the bearer access tokens."""

from datetime import timedelta
from typing import Any, Optional

from jose import jwt

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now

settings = get_settings()


def create_access_token(
    *,
    subject: str,
    email: Optional[str],
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    expires_at = utc_now() + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims: dict[str, Any] = {
        "sub": subject,
        "email": email,
        "role": role,
        "iat": int(utc_now().timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a token. Raises ``jose.JWTError`` when invalid."""
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
