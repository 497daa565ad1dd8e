import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import require_coach
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.sessions_service.schemas import (
    TimeSlotCreate,
    TimeSlotFilters,
    TimeSlotResponse,
    TimeSlotUpdate,
)
from services.sessions_service.services import time_slot_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/time-slots", tags=["time-slots"])


@router.get("/", response_model=List[TimeSlotResponse])
async def list_available_time_slots(
    coach_id: Optional[uuid.UUID] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: AsyncSession = Depends(get_async_db),
):
    """Bookable slots from ``start_date`` (default: now), earliest first."""
    filters = TimeSlotFilters(
        coach_id=coach_id, start_date=start_date, end_date=end_date
    )
    return await time_slot_service.find_available(db, filters)


@router.get("/coach/me", response_model=List[TimeSlotResponse])
async def list_my_time_slots(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    filters = TimeSlotFilters(start_date=start_date, end_date=end_date)
    return await time_slot_service.find_by_coach(db, current_user.user_id, filters)


@router.get("/{slot_id}", response_model=TimeSlotResponse)
async def get_time_slot(slot_id: uuid.UUID, db: AsyncSession = Depends(get_async_db)):
    return await time_slot_service.find_one(db, slot_id)


@router.post("/", response_model=TimeSlotResponse, status_code=status.HTTP_201_CREATED)
async def create_time_slot(
    payload: TimeSlotCreate,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    return await time_slot_service.create_time_slot(db, payload, current_user)


@router.patch("/{slot_id}", response_model=TimeSlotResponse)
async def update_time_slot(
    slot_id: uuid.UUID,
    payload: TimeSlotUpdate,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    return await time_slot_service.update_time_slot(
        db, slot_id, payload, current_user
    )


@router.delete("/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_time_slot(
    slot_id: uuid.UUID,
    current_user: AuthUser = Depends(require_coach),
    db: AsyncSession = Depends(get_async_db),
):
    await time_slot_service.remove_time_slot(db, slot_id, current_user)
