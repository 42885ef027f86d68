"""Repository implementations for infrastructure layer."""

from .notifiable_notification_repository import NotifiableNotificationRepository
from .notifiable_repository import NotifiableRepository
from .notification_repository import NotificationRepository, notification_to_entity

__all__ = [
    "NotifiableNotificationRepository",
    "NotifiableRepository",
    "NotificationRepository",
    "notification_to_entity",
]
