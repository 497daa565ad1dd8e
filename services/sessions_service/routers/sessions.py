import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from libs.auth.dependencies import get_current_user, require_admin
from libs.auth.models import AuthUser
from libs.common.rate_limit import booking_limit
from libs.db.session import get_async_db
from services.sessions_service.models import SessionStatus
from services.sessions_service.schemas import (
    PaymentRecord,
    ReminderRunResponse,
    SessionCreate,
    SessionFilters,
    SessionResponse,
    SessionStatsResponse,
    SessionUpdate,
)
from services.sessions_service.services import session_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("/", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
@booking_limit
async def book_session(
    request: Request,
    payload: SessionCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Book an available time slot for a booking type."""
    return await session_service.create_session(db, payload, current_user)


@router.get("/", response_model=List[SessionResponse])
async def list_sessions(
    status_filter: Optional[SessionStatus] = Query(default=None, alias="status"),
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    filters = SessionFilters(
        status=status_filter, start_date=start_date, end_date=end_date
    )
    return await session_service.find_all(db, filters, current_user)


@router.get("/stats", response_model=SessionStatsResponse)
async def get_session_stats(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await session_service.stats(db, current_user)


@router.post("/reminders", response_model=ReminderRunResponse)
async def run_booking_reminders(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Send reminders for sessions in the next 24 hours (scheduler hook)."""
    reminded = await session_service.send_booking_reminders(db)
    return ReminderRunResponse(reminded=reminded)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await session_service.find_one(db, session_id, current_user)


@router.patch("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: uuid.UUID,
    payload: SessionUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await session_service.update_session(db, session_id, payload, current_user)


@router.put("/{session_id}/cancel", response_model=SessionResponse)
async def cancel_session(
    session_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await session_service.cancel_session(db, session_id, current_user)


@router.put("/{session_id}/paid", response_model=SessionResponse)
async def record_session_payment(
    session_id: uuid.UUID,
    payload: PaymentRecord,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Mark a session paid once the payments integration confirms the charge."""
    return await session_service.mark_paid(db, session_id, payload.payment_id)
