import uuid
from typing import List

from fastapi import APIRouter, Depends
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.communications_service.schemas import (
    NotificationResponse,
    UnreadCountResponse,
)
from services.communications_service.services import notification_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=List[NotificationResponse])
async def list_my_notifications(
    unread_only: bool = False,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await notification_service.list_notifications(
        db, current_user.user_id, unread_only=unread_only
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    count = await notification_service.count_unread(db, current_user.user_id)
    return UnreadCountResponse(unread_count=count)


@router.patch("/read-all", response_model=UnreadCountResponse)
async def mark_all_notifications_read(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    await notification_service.mark_all_read(db, current_user.user_id)
    return UnreadCountResponse(unread_count=0)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await notification_service.mark_read(
        db, notification_id, current_user.user_id
    )
