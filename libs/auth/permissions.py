"""Per-resource authorization predicates.

Every ownership decision in the services goes through one of these helpers so
the admin bypass and participant rules live in one place.
"""

import enum
import uuid
from typing import Optional, Protocol

from libs.auth.models import AuthUser
from libs.common.errors import ForbiddenError


class SessionLike(Protocol):
    user_id: uuid.UUID
    coach_id: uuid.UUID


class SessionScope(str, enum.Enum):
    """Which participant column a caller's session listing is filtered on."""

    ALL = "all"
    AS_CLIENT = "user_id"
    AS_COACH = "coach_id"


def can_manage_owned(user: AuthUser, owner_id: uuid.UUID) -> bool:
    """Owner-or-admin: time slots, booking types, discounts."""
    return user.is_admin or user.user_id == owner_id


def is_session_participant(user: AuthUser, session: SessionLike) -> bool:
    return user.user_id in (session.user_id, session.coach_id)


def can_view_session(user: AuthUser, session: SessionLike) -> bool:
    return user.is_admin or is_session_participant(user, session)


def can_mutate_session(user: AuthUser, session: SessionLike) -> bool:
    return can_view_session(user, session)


def can_manage_session(user: AuthUser, session: SessionLike) -> bool:
    """Coach-side changes (status, payment flag): the session's coach or admin."""
    return user.is_admin or user.user_id == session.coach_id


def session_scope(user: AuthUser) -> SessionScope:
    if user.is_admin:
        return SessionScope.ALL
    if user.is_client:
        return SessionScope.AS_CLIENT
    return SessionScope.AS_COACH


def ensure_allowed(allowed: bool, detail: str) -> None:
    """Raise ``ForbiddenError(detail)`` unless ``allowed``."""
    if not allowed:
        raise ForbiddenError(detail)


def ensure_owner(
    user: AuthUser, owner_id: uuid.UUID, action: str, resource: str
) -> None:
    ensure_allowed(
        can_manage_owned(user, owner_id),
        f"Not authorized to {action} this {resource}",
    )


def scoped_user_id(user: AuthUser, target_id: Optional[uuid.UUID]) -> uuid.UUID:
    """Admins may act for another coach; everyone else acts as themselves."""
    if user.is_admin and target_id is not None:
        return target_id
    return user.user_id
