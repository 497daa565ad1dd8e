"""Domain error taxonomy shared by every service.

Services raise these directly; they are ``HTTPException`` subclasses so the
HTTP layer maps them to status codes without any translation step.
"""

from typing import Optional

from fastapi import HTTPException, status


class DomainError(HTTPException):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "BAD_REQUEST"

    def __init__(self, detail: str, code: Optional[str] = None):
        super().__init__(status_code=self.status_code, detail=detail)
        if code:
            self.code = code


class BadRequestError(DomainError):
    """A domain precondition failed (unavailable slot, already cancelled...)."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"


class ForbiddenError(DomainError):
    """The caller is authenticated but may not act on this resource."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class ConflictError(DomainError):
    """Uniqueness violation or a lost race on a guarded write."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
