"""Time slot registry: coach calendars and the availability flag."""

import uuid
from typing import Optional

from libs.auth.models import AuthUser
from libs.auth.permissions import ensure_owner, scoped_user_id
from libs.common.datetime_utils import utc_now
from libs.common.errors import ConflictError, NotFoundError
from libs.common.logging import get_logger
from services.sessions_service.models import Session, TimeSlot
from services.sessions_service.schemas import (
    TimeSlotCreate,
    TimeSlotFilters,
    TimeSlotUpdate,
)
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

TIME_SLOT_NOT_FOUND = "Time slot not found"
SLOT_BOOKED = "Cannot delete a booked time slot"


def _window(query, filters: TimeSlotFilters):
    """Restrict to ``start_date`` (default: now) .. ``end_date`` (open)."""
    query = query.where(TimeSlot.date_time >= (filters.start_date or utc_now()))
    if filters.end_date:
        query = query.where(TimeSlot.date_time <= filters.end_date)
    return query


async def find_available(db: AsyncSession, filters: TimeSlotFilters) -> list[TimeSlot]:
    query = _window(select(TimeSlot).where(TimeSlot.is_available.is_(True)), filters)
    if filters.coach_id:
        query = query.where(TimeSlot.coach_id == filters.coach_id)
    result = await db.execute(query.order_by(TimeSlot.date_time.asc()))
    return list(result.scalars().all())


async def find_by_coach(
    db: AsyncSession, coach_id: uuid.UUID, filters: TimeSlotFilters
) -> list[TimeSlot]:
    """All of a coach's slots in the window, booked or not."""
    query = _window(select(TimeSlot).where(TimeSlot.coach_id == coach_id), filters)
    result = await db.execute(query.order_by(TimeSlot.date_time.asc()))
    return list(result.scalars().all())


async def find_one(db: AsyncSession, slot_id: uuid.UUID) -> TimeSlot:
    slot = await db.get(TimeSlot, slot_id)
    if not slot:
        raise NotFoundError(TIME_SLOT_NOT_FOUND)
    return slot


async def find_available_by_id(
    db: AsyncSession, slot_id: uuid.UUID
) -> Optional[TimeSlot]:
    result = await db.execute(
        select(TimeSlot).where(TimeSlot.id == slot_id, TimeSlot.is_available.is_(True))
    )
    return result.scalar_one_or_none()


async def create_time_slot(
    db: AsyncSession, data: TimeSlotCreate, current_user: AuthUser
) -> TimeSlot:
    slot = TimeSlot(
        coach_id=scoped_user_id(current_user, data.coach_id),
        date_time=data.date_time,
        duration_min=data.duration_min,
    )
    db.add(slot)
    await db.commit()
    await db.refresh(slot)

    logger.info("Coach %s created time slot %s", slot.coach_id, slot.id)
    return slot


async def update_time_slot(
    db: AsyncSession,
    slot_id: uuid.UUID,
    data: TimeSlotUpdate,
    current_user: AuthUser,
) -> TimeSlot:
    slot = await find_one(db, slot_id)
    ensure_owner(current_user, slot.coach_id, "update", "time slot")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(slot, field, value)
    slot.updated_at = utc_now()

    await db.commit()
    await db.refresh(slot)
    return slot


async def remove_time_slot(db: AsyncSession, slot_id: uuid.UUID, current_user: AuthUser) -> None:
    slot = await find_one(db, slot_id)
    ensure_owner(current_user, slot.coach_id, "delete", "time slot")

    # Sessions keep a reference to their slot, cancelled ones included.
    booked = await db.execute(
        select(Session.id).where(Session.time_slot_id == slot_id).limit(1)
    )
    if booked.scalar_one_or_none() is not None:
        raise ConflictError(SLOT_BOOKED)

    await db.delete(slot)
    await db.commit()
    logger.info("Deleted time slot %s", slot_id)


# ---------------------------------------------------------------------------
# Availability flag (used by the session lifecycle, no ownership checks)
# ---------------------------------------------------------------------------


async def claim(db: AsyncSession, slot_id: uuid.UUID) -> bool:
    """Flip ``is_available`` true -> false in one conditional UPDATE.

    Returns False when the slot was already taken (or does not exist), so two
    concurrent bookings can never both claim it. Does not commit.
    """
    result = await db.execute(
        update(TimeSlot)
        .where(TimeSlot.id == slot_id, TimeSlot.is_available.is_(True))
        .values(is_available=False, updated_at=utc_now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def mark_unavailable(db: AsyncSession, slot_id: uuid.UUID) -> bool:
    """Claim the slot and commit. Returns whether this call flipped it."""
    await find_one(db, slot_id)
    claimed = await claim(db, slot_id)
    await db.commit()
    return claimed


async def release(db: AsyncSession, slot_id: uuid.UUID) -> None:
    """Set ``is_available`` back to true. Does not commit."""
    await db.execute(
        update(TimeSlot)
        .where(TimeSlot.id == slot_id)
        .values(is_available=True, updated_at=utc_now())
        .execution_options(synchronize_session=False)
    )


async def mark_available(db: AsyncSession, slot_id: uuid.UUID) -> None:
    await find_one(db, slot_id)
    await release(db, slot_id)
    await db.commit()
