import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_coach
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.sessions_service.schemas import (
    BookingTypeCreate,
    BookingTypeResponse,
    BookingTypeUpdate,
)
from services.sessions_service.services import booking_type_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/booking-types", tags=["booking-types"])


@router.get("/", response_model=List[BookingTypeResponse])
async def list_booking_types(db: AsyncSession = Depends(get_async_db)):
    return await booking_type_service.list_active(db)


@router.get("/coach/{coach_id}", response_model=List[BookingTypeResponse])
async def list_coach_booking_types(
    coach_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)
):
    return await booking_type_service.list_by_coach(db, coach_id)


@router.get("/{booking_type_id}", response_model=BookingTypeResponse)
async def get_booking_type(
    booking_type_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)
):
    return await booking_type_service.get_booking_type(db, booking_type_id)


@router.post(
    "/", response_model=BookingTypeResponse, status_code=status.HTTP_201_CREATED
)
async def create_booking_type(
    payload: BookingTypeCreate,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    return await booking_type_service.create_booking_type(db, payload, current_user)


@router.patch("/{booking_type_id}", response_model=BookingTypeResponse)
async def update_booking_type(
    booking_type_id: uuid.UUID,
    payload: BookingTypeUpdate,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    return await booking_type_service.update_booking_type(
        db, booking_type_id, payload, current_user
    )


@router.delete("/{booking_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking_type(
    booking_type_id: uuid.UUID,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    """Soft delete: the booking type stays on existing sessions."""
    await booking_type_service.remove_booking_type(db, booking_type_id, current_user)
