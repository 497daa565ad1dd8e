"""Communications Service schemas."""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from services.communications_service.models import (
    NotificationPriority,
    NotificationType,
)


class NotificationResponse(BaseModel):
    id: uuid.UUID
    type: NotificationType
    title: str
    message: str
    recipient_id: uuid.UUID
    sender_id: Optional[uuid.UUID] = None
    priority: NotificationPriority
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias="payload")
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    unread_count: int


__all__ = [
    "NotificationResponse",
    "UnreadCountResponse",
]
