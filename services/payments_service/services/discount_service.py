"""Discount ledger: coach-owned fixed-amount codes with usage limits."""

import uuid
from typing import Optional

from libs.auth.models import AuthUser
from libs.auth.permissions import ensure_owner, scoped_user_id
from libs.common.datetime_utils import as_utc, utc_now
from libs.common.errors import BadRequestError, NotFoundError
from libs.common.logging import get_logger
from services.payments_service.models import Discount
from services.payments_service.schemas import DiscountCreate, DiscountUpdate
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

INVALID_CODE = "Invalid or expired discount code"
USAGE_LIMIT_REACHED = "Discount code usage limit reached"


def _is_expired(discount: Discount) -> bool:
    return as_utc(discount.expiry) < utc_now()


def _is_exhausted(discount: Discount) -> bool:
    return discount.use_count >= discount.max_usage


async def _get_by_code(
    db: AsyncSession, code: str, *, active_only: bool = False
) -> Optional[Discount]:
    # use_count moves through guarded UPDATEs; always read the stored value.
    query = (
        select(Discount)
        .where(Discount.code == code)
        .execution_options(populate_existing=True)
    )
    if active_only:
        query = query.where(Discount.is_active.is_(True))
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def list_by_coach(db: AsyncSession, coach_id: uuid.UUID) -> list[Discount]:
    result = await db.execute(
        select(Discount)
        .where(Discount.coach_id == coach_id)
        .order_by(Discount.created_at.desc())
    )
    return list(result.scalars().all())


async def create_discount(
    db: AsyncSession, data: DiscountCreate, current_user: AuthUser
) -> Discount:
    if await _get_by_code(db, data.code):
        raise BadRequestError("Discount code already exists")

    discount = Discount(
        coach_id=scoped_user_id(current_user, data.coach_id),
        **data.model_dump(exclude={"coach_id"}),
    )
    db.add(discount)
    await db.commit()
    await db.refresh(discount)

    logger.info("Coach %s created discount %s", discount.coach_id, discount.code)
    return discount


async def update_by_code(
    db: AsyncSession, code: str, data: DiscountUpdate, current_user: AuthUser
) -> Discount:
    """Update an active code. Inactive (deleted) codes are reported as missing."""
    discount = await _get_by_code(db, code, active_only=True)
    if not discount:
        raise NotFoundError("Discount not found")
    ensure_owner(current_user, discount.coach_id, "update", "discount")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(discount, field, value)
    discount.updated_at = utc_now()

    await db.commit()
    await db.refresh(discount)
    return discount


async def remove_by_code(db: AsyncSession, code: str, current_user: AuthUser) -> None:
    discount = await _get_by_code(db, code)
    if not discount:
        raise NotFoundError("Discount not found")
    ensure_owner(current_user, discount.coach_id, "delete", "discount")

    discount.is_active = False
    discount.updated_at = utc_now()
    await db.commit()
    logger.info("Deactivated discount %s", code)


async def validate_code(db: AsyncSession, code: str) -> Discount:
    """Return the discount if it can be redeemed right now, else raise."""
    discount = await _get_by_code(db, code, active_only=True)
    if not discount or _is_expired(discount):
        raise BadRequestError(INVALID_CODE)
    if _is_exhausted(discount):
        raise BadRequestError(USAGE_LIMIT_REACHED)
    return discount


async def find_applicable(
    db: AsyncSession, code: str, *, coach_id: Optional[uuid.UUID] = None
) -> Optional[Discount]:
    """Like ``validate_code`` but returns ``None`` instead of raising.

    With ``coach_id`` only that coach's codes apply.
    """
    discount = await _get_by_code(db, code, active_only=True)
    if not discount or _is_expired(discount) or _is_exhausted(discount):
        return None
    if coach_id is not None and discount.coach_id != coach_id:
        return None
    return discount


async def increment_usage(db: AsyncSession, code: str) -> bool:
    """Count one redemption, guarded by ``use_count < max_usage``.

    Returns False when the limit was reached in the meantime. Does not commit.
    """
    result = await db.execute(
        update(Discount)
        .where(
            Discount.code == code,
            Discount.is_active.is_(True),
            Discount.use_count < Discount.max_usage,
        )
        .values(use_count=Discount.use_count + 1, updated_at=utc_now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
