import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends
from libs.db.session import get_async_db
from services.accounts_service.schemas import CoachResponse
from services.accounts_service.services import account_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/coaches", tags=["coaches"])


@router.get("/", response_model=List[CoachResponse])
async def list_coaches(
    country: Optional[str] = None,
    db: AsyncSession = Depends(get_async_db),
):
    """Public coach directory; only active coaches are listed."""
    return await account_service.list_coaches(db, country=country)


@router.get("/{coach_id}", response_model=CoachResponse)
async def get_coach(
    coach_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_db),
):
    return await account_service.get_coach(db, coach_id)
