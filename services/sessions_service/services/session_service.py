"""Session lifecycle: booking, listing, status changes and cancellation.

Booking runs as one unit of work: pending-limit check, pricing, discount
redemption, session insert and the guarded slot claim all commit together or
not at all.
"""

import uuid
from datetime import datetime, timedelta
from typing import Optional

from libs.auth.models import AuthUser
from libs.auth.permissions import (
    SessionScope,
    can_manage_session,
    can_mutate_session,
    can_view_session,
    ensure_allowed,
    session_scope,
)
from libs.common.config import get_settings
from libs.common.currency import ZERO, apply_fixed_discount, to_money
from libs.common.datetime_utils import as_utc, utc_now
from libs.common.errors import BadRequestError, ConflictError, NotFoundError
from libs.common.logging import get_logger
from services.communications_service.services import notification_service
from services.payments_service.services import discount_service
from services.sessions_service.models import (
    ALLOWED_TRANSITIONS,
    Session,
    SessionStatus,
)
from services.sessions_service.schemas import (
    SessionCreate,
    SessionFilters,
    SessionStatsResponse,
    SessionUpdate,
)
from services.sessions_service.services import (
    booking_type_service,
    time_slot_service,
)
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

SESSION_NOT_FOUND = "Session not found"
SLOT_TAKEN = "Time slot was booked by another request"

# Fields only the session's coach (or an admin) may change.
MANAGED_FIELDS = frozenset({"status", "is_paid", "payment_id"})

ACTIVE_STATUSES = (SessionStatus.SCHEDULED, SessionStatus.CONFIRMED)


def _scoped(query, current_user: AuthUser):
    scope = session_scope(current_user)
    if scope is SessionScope.AS_CLIENT:
        return query.where(Session.user_id == current_user.user_id)
    if scope is SessionScope.AS_COACH:
        return query.where(Session.coach_id == current_user.user_id)
    return query


async def _get_session(db: AsyncSession, session_id: uuid.UUID) -> Session:
    session = await db.get(Session, session_id)
    if not session:
        raise NotFoundError(SESSION_NOT_FOUND)
    return session


async def _count_pending(db: AsyncSession, user_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count(Session.id)).where(
            Session.user_id == user_id,
            Session.is_paid.is_(False),
            Session.status == SessionStatus.SCHEDULED,
        )
    )
    return result.scalar_one() or 0


async def _notify_safely(db: AsyncSession, session: Session, notify, **kwargs) -> None:
    """Write notifications in their own commit; failures never undo the caller."""
    try:
        await notify(db, session, **kwargs)
        await db.commit()
    except Exception:
        logger.exception("Failed to write notifications for session %s", session.id)
        await db.rollback()
        await db.refresh(session)


# ---------------------------------------------------------------------------
# Booking
# ---------------------------------------------------------------------------


async def create_session(
    db: AsyncSession, data: SessionCreate, current_user: AuthUser
) -> Session:
    settings = get_settings()
    user_id = current_user.user_id

    if await _count_pending(db, user_id) >= settings.MAX_PENDING_BOOKINGS:
        raise BadRequestError(
            f"Maximum pending bookings ({settings.MAX_PENDING_BOOKINGS}) reached. "
            "Please complete payment for existing bookings."
        )

    booking_type = await booking_type_service.find_active_by_id(
        db, data.booking_type_id
    )
    if not booking_type:
        raise BadRequestError("Invalid booking type")

    slot = await time_slot_service.find_available_by_id(db, data.time_slot_id)
    if not slot:
        raise BadRequestError("Time slot not available")

    price = to_money(booking_type.base_price)
    discount_id: Optional[uuid.UUID] = None
    if data.discount_code:
        discount = await discount_service.find_applicable(
            db, data.discount_code, coach_id=booking_type.coach_id
        )
        if discount and await discount_service.increment_usage(db, discount.code):
            price = apply_fixed_discount(price, discount.amount)
            discount_id = discount.id

    session = Session(
        user_id=user_id,
        coach_id=booking_type.coach_id,
        booking_type_id=booking_type.id,
        time_slot_id=slot.id,
        discount_id=discount_id,
        date_time=as_utc(slot.date_time),
        duration_min=slot.duration_min,
        status=SessionStatus.SCHEDULED,
        price=price,
        is_paid=False,
        discount_code=data.discount_code,
        notes=data.notes,
    )
    db.add(session)
    await db.flush()

    if not await time_slot_service.claim(db, slot.id):
        await db.rollback()
        logger.warning("Slot %s was claimed concurrently; booking rejected", slot.id)
        raise ConflictError(SLOT_TAKEN)

    await db.commit()
    await db.refresh(session)
    logger.info(
        "Created session %s for user %s with coach %s (price=%s)",
        session.id,
        user_id,
        session.coach_id,
        session.price,
    )

    await _notify_safely(db, session, notification_service.notify_booking_confirmed)
    return session


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def find_all(
    db: AsyncSession, filters: SessionFilters, current_user: AuthUser
) -> list[Session]:
    query = _scoped(select(Session), current_user)
    if filters.status:
        query = query.where(Session.status == filters.status)
    if filters.start_date:
        query = query.where(Session.date_time >= filters.start_date)
    if filters.end_date:
        query = query.where(Session.date_time <= filters.end_date)

    result = await db.execute(query.order_by(Session.date_time.desc()))
    return list(result.scalars().all())


async def find_one(
    db: AsyncSession, session_id: uuid.UUID, current_user: AuthUser
) -> Session:
    session = await _get_session(db, session_id)
    ensure_allowed(
        can_view_session(current_user, session),
        "Not authorized to access this session",
    )
    return session


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def _check_transition(current: SessionStatus, target: SessionStatus) -> None:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise BadRequestError(
            f"Invalid status transition from {current.value} to {target.value}"
        )


async def update_session(
    db: AsyncSession,
    session_id: uuid.UUID,
    data: SessionUpdate,
    current_user: AuthUser,
) -> Session:
    session = await find_one(db, session_id, current_user)
    changes = data.model_dump(exclude_unset=True)

    if MANAGED_FIELDS & changes.keys():
        ensure_allowed(
            can_manage_session(current_user, session),
            "Not authorized to update this session",
        )

    target = changes.pop("status", None)
    if target is not None and target != session.status:
        _check_transition(session.status, target)
        session.status = target
        if target == SessionStatus.CANCELLED:
            await time_slot_service.release(db, session.time_slot_id)

    for field, value in changes.items():
        setattr(session, field, value)
    session.updated_at = utc_now()

    await db.commit()
    await db.refresh(session)
    return session


async def cancel_session(
    db: AsyncSession, session_id: uuid.UUID, current_user: AuthUser
) -> Session:
    session = await _get_session(db, session_id)
    ensure_allowed(
        can_mutate_session(current_user, session),
        "Not authorized to cancel this session",
    )

    if session.status == SessionStatus.CANCELLED:
        raise BadRequestError("Session already cancelled")
    if session.status == SessionStatus.COMPLETED:
        raise BadRequestError("Cannot cancel a completed session")
    if as_utc(session.date_time) < utc_now():
        raise BadRequestError("Cannot cancel past sessions")

    session.status = SessionStatus.CANCELLED
    session.updated_at = utc_now()
    await time_slot_service.release(db, session.time_slot_id)

    await db.commit()
    await db.refresh(session)
    logger.info("Session %s cancelled by %s", session.id, current_user.user_id)

    await _notify_safely(
        db,
        session,
        notification_service.notify_booking_cancelled,
        cancelled_by=current_user.user_id,
    )
    return session


async def mark_paid(db: AsyncSession, session_id: uuid.UUID, payment_id: str) -> Session:
    """Record a successful payment against a session."""
    session = await _get_session(db, session_id)
    session.is_paid = True
    session.payment_id = payment_id
    session.updated_at = utc_now()

    await db.commit()
    await db.refresh(session)
    logger.info("Session %s marked paid (payment=%s)", session.id, payment_id)
    return session


# ---------------------------------------------------------------------------
# Reminders & stats
# ---------------------------------------------------------------------------


async def send_booking_reminders(
    db: AsyncSession,
    *,
    now: Optional[datetime] = None,
    window: timedelta = timedelta(hours=24),
) -> int:
    """Remind participants of active sessions starting within ``window``.

    Each session is reminded at most once. Returns the number of sessions.
    """
    now = now or utc_now()
    result = await db.execute(
        select(Session).where(
            Session.status.in_(ACTIVE_STATUSES),
            Session.date_time >= now,
            Session.date_time <= now + window,
            Session.reminder_sent_at.is_(None),
        )
    )
    sessions = list(result.scalars().all())

    for session in sessions:
        await notification_service.notify_booking_reminder(db, session)
        session.reminder_sent_at = now
    await db.commit()

    if sessions:
        logger.info("Sent reminders for %d sessions", len(sessions))
    return len(sessions)


async def stats(db: AsyncSession, current_user: AuthUser) -> SessionStatsResponse:
    """Per-status counts, upcoming count and completed revenue in scope."""
    rows = await db.execute(
        _scoped(
            select(Session.status, func.count(Session.id)).group_by(Session.status),
            current_user,
        )
    )
    by_status = {status: 0 for status in SessionStatus}
    for status, count in rows.all():
        by_status[SessionStatus(status)] = count

    upcoming = await db.execute(
        _scoped(
            select(func.count(Session.id)).where(
                Session.status.in_(ACTIVE_STATUSES),
                Session.date_time >= utc_now(),
            ),
            current_user,
        )
    )
    revenue = await db.execute(
        _scoped(
            select(func.coalesce(func.sum(Session.price), 0)).where(
                Session.status == SessionStatus.COMPLETED
            ),
            current_user,
        )
    )

    return SessionStatsResponse(
        total=sum(by_status.values()),
        upcoming=upcoming.scalar_one() or 0,
        by_status=by_status,
        completed_revenue=to_money(revenue.scalar_one() or ZERO),
    )
