"""Booking type catalog. Deletion is soft (``is_active=False``)."""

import uuid
from typing import Optional

from libs.auth.models import AuthUser
from libs.auth.permissions import ensure_owner, scoped_user_id
from libs.common.datetime_utils import utc_now
from libs.common.errors import NotFoundError
from libs.common.logging import get_logger
from services.sessions_service.models import BookingType
from services.sessions_service.schemas import BookingTypeCreate, BookingTypeUpdate
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def list_active(db: AsyncSession) -> list[BookingType]:
    result = await db.execute(
        select(BookingType)
        .where(BookingType.is_active.is_(True))
        .order_by(BookingType.created_at.desc())
    )
    return list(result.scalars().all())


async def list_by_coach(db: AsyncSession, coach_id: uuid.UUID) -> list[BookingType]:
    """Active booking types of one coach; empty list when there are none."""
    result = await db.execute(
        select(BookingType)
        .where(BookingType.coach_id == coach_id, BookingType.is_active.is_(True))
        .order_by(BookingType.created_at.desc())
    )
    return list(result.scalars().all())


async def get_booking_type(db: AsyncSession, booking_type_id: uuid.UUID) -> BookingType:
    booking_type = await db.get(BookingType, booking_type_id)
    if not booking_type:
        raise NotFoundError("Booking type not found")
    return booking_type


async def find_active_by_id(
    db: AsyncSession, booking_type_id: uuid.UUID
) -> Optional[BookingType]:
    result = await db.execute(
        select(BookingType).where(
            BookingType.id == booking_type_id, BookingType.is_active.is_(True)
        )
    )
    return result.scalar_one_or_none()


async def create_booking_type(
    db: AsyncSession, data: BookingTypeCreate, current_user: AuthUser
) -> BookingType:
    booking_type = BookingType(
        coach_id=scoped_user_id(current_user, data.coach_id),
        **data.model_dump(exclude={"coach_id"}),
    )
    db.add(booking_type)
    await db.commit()
    await db.refresh(booking_type)

    logger.info(
        "Coach %s created booking type %s (%s)",
        booking_type.coach_id,
        booking_type.id,
        booking_type.name,
    )
    return booking_type


async def update_booking_type(
    db: AsyncSession,
    booking_type_id: uuid.UUID,
    data: BookingTypeUpdate,
    current_user: AuthUser,
) -> BookingType:
    booking_type = await get_booking_type(db, booking_type_id)
    ensure_owner(current_user, booking_type.coach_id, "update", "booking type")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(booking_type, field, value)
    booking_type.updated_at = utc_now()

    await db.commit()
    await db.refresh(booking_type)
    return booking_type


async def remove_booking_type(
    db: AsyncSession, booking_type_id: uuid.UUID, current_user: AuthUser
) -> None:
    booking_type = await get_booking_type(db, booking_type_id)
    ensure_owner(current_user, booking_type.coach_id, "delete", "booking type")

    booking_type.is_active = False
    booking_type.updated_at = utc_now()
    await db.commit()
    logger.info("Deactivated booking type %s", booking_type_id)
