"""In-app notifications: creation hooks for booking events, inbox reads."""

import uuid
from typing import Any, Optional

from libs.common.datetime_utils import utc_now
from libs.common.errors import ForbiddenError, NotFoundError
from libs.common.logging import get_logger
from services.communications_service.models import (
    Notification,
    NotificationPriority,
    NotificationType,
)
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def build_notification(
    *,
    recipient_id: uuid.UUID,
    notification_type: NotificationType,
    title: str,
    message: str,
    sender_id: Optional[uuid.UUID] = None,
    priority: NotificationPriority = NotificationPriority.MEDIUM,
    metadata: Optional[dict[str, Any]] = None,
) -> Notification:
    return Notification(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=notification_type,
        title=title,
        message=message,
        priority=priority,
        payload=metadata or {},
    )


async def notify_booking_confirmed(db: AsyncSession, session) -> list[Notification]:
    """Write confirmation notices for both participants of a new booking.

    The caller owns the commit.
    """
    when = session.date_time.isoformat()
    metadata = {"session_id": str(session.id), "date_time": when}
    notifications = [
        build_notification(
            recipient_id=session.user_id,
            sender_id=session.coach_id,
            notification_type=NotificationType.BOOKING_CONFIRMATION,
            title="Booking confirmed",
            message=f"Your session on {when} has been booked.",
            priority=NotificationPriority.HIGH,
            metadata=metadata,
        ),
        build_notification(
            recipient_id=session.coach_id,
            sender_id=session.user_id,
            notification_type=NotificationType.BOOKING_CONFIRMATION,
            title="New booking",
            message=f"A client booked your time slot on {when}.",
            metadata=metadata,
        ),
    ]
    db.add_all(notifications)
    await db.flush()
    return notifications


async def notify_booking_cancelled(
    db: AsyncSession, session, *, cancelled_by: uuid.UUID
) -> list[Notification]:
    """Tell the participants other than ``cancelled_by`` that a session was cancelled.

    When an admin cancels, both the user and the coach are notified.
    """
    recipients = [
        participant
        for participant in (session.user_id, session.coach_id)
        if participant != cancelled_by
    ]
    message = f"The session on {session.date_time.isoformat()} was cancelled."
    notifications = [
        build_notification(
            recipient_id=recipient,
            sender_id=cancelled_by,
            notification_type=NotificationType.BOOKING_CANCELLATION,
            title="Session cancelled",
            message=message,
            priority=NotificationPriority.HIGH,
            metadata={"session_id": str(session.id)},
        )
        for recipient in recipients
    ]
    db.add_all(notifications)
    await db.flush()
    return notifications


async def list_notifications(
    db: AsyncSession, recipient_id: uuid.UUID, *, unread_only: bool = False
) -> list[Notification]:
    query = (
        select(Notification)
        .where(Notification.recipient_id == recipient_id)
        .order_by(Notification.created_at.desc())
    )
    if unread_only:
        query = query.where(Notification.is_read.is_(False))
    result = await db.execute(query)
    return list(result.scalars().all())


async def count_unread(db: AsyncSession, recipient_id: uuid.UUID) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(
            Notification.recipient_id == recipient_id,
            Notification.is_read.is_(False),
        )
    )
    return result.scalar_one() or 0


async def mark_read(
    db: AsyncSession, notification_id: uuid.UUID, recipient_id: uuid.UUID
) -> Notification:
    notification = await db.get(Notification, notification_id)
    if not notification:
        raise NotFoundError("Notification not found")
    if notification.recipient_id != recipient_id:
        raise ForbiddenError("Not authorized to update this notification")

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utc_now()
        await db.commit()
        await db.refresh(notification)
    return notification


async def mark_all_read(db: AsyncSession, recipient_id: uuid.UUID) -> int:
    result = await db.execute(
        update(Notification)
        .where(
            Notification.recipient_id == recipient_id,
            Notification.is_read.is_(False),
        )
        .values(is_read=True, read_at=utc_now())
    )
    await db.commit()
    logger.info("Marked %d notifications read for %s", result.rowcount, recipient_id)
    return result.rowcount


async def notify_booking_reminder(db: AsyncSession, session) -> list[Notification]:
    """Remind both participants of an upcoming session. Caller commits."""
    when = session.date_time.isoformat()
    metadata = {"session_id": str(session.id), "date_time": when}
    notifications = [
        build_notification(
            recipient_id=recipient,
            notification_type=NotificationType.BOOKING_REMINDER,
            title="Upcoming session",
            message=f"Reminder: you have a session on {when}.",
            metadata=metadata,
        )
        for recipient in (session.user_id, session.coach_id)
    ]
    db.add_all(notifications)
    await db.flush()
    return notifications


async def notify_role_changed(
    db: AsyncSession,
    *,
    account_id: uuid.UUID,
    previous_role: str,
    new_role: str,
    changed_by: uuid.UUID,
) -> Notification:
    notification = build_notification(
        recipient_id=account_id,
        sender_id=changed_by,
        notification_type=NotificationType.ROLE_CHANGE,
        title="Your role has changed",
        message=f"Your account role changed from {previous_role} to {new_role}.",
        metadata={"previous_role": previous_role, "new_role": new_role},
    )
    db.add(notification)
    await db.flush()
    return notification
