"""Communications Service models package."""

from services.communications_service.models.core import Notification  # noqa: F401
from services.communications_service.models.enums import (  # noqa: F401
    NotificationPriority,
    NotificationType,
    enum_values,
)

__all__ = [
    "Notification",
    "NotificationPriority",
    "NotificationType",
    "enum_values",
]
