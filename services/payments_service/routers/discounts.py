from typing import List

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import get_current_user, require_coach
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.payments_service.schemas import (
    DiscountCreate,
    DiscountResponse,
    DiscountUpdate,
    DiscountValidationResponse,
)
from services.payments_service.services import discount_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/discounts", tags=["discounts"])


@router.get("/coach/me", response_model=List[DiscountResponse])
async def list_my_discounts(
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    return await discount_service.list_by_coach(db, current_user.user_id)


@router.post("/", response_model=DiscountResponse, status_code=status.HTTP_201_CREATED)
async def create_discount(
    payload: DiscountCreate,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    return await discount_service.create_discount(db, payload, current_user)


@router.get("/validate/{code}", response_model=DiscountValidationResponse)
async def validate_discount(
    code: str,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Check whether a code can be redeemed right now."""
    discount = await discount_service.validate_code(db, code)
    return DiscountValidationResponse(
        code=discount.code,
        amount=discount.amount,
        coach_id=discount.coach_id,
        remaining_uses=discount.max_usage - discount.use_count,
        expiry=discount.expiry,
    )


@router.patch("/{code}", response_model=DiscountResponse)
async def update_discount(
    code: str,
    payload: DiscountUpdate,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    return await discount_service.update_by_code(db, code, payload, current_user)


@router.delete("/{code}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_discount(
    code: str,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    await discount_service.remove_by_code(db, code, current_user)
