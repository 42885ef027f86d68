"""ORM models used by the application infrastructure."""

from .notifiable import NotifiableEntityModel
from .notifiable_notification import NotifiableNotificationModel
from .notification import NotificationModel

__all__ = [
    "NotifiableEntityModel",
    "NotifiableNotificationModel",
    "NotificationModel",
]
