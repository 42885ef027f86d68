"""Domain entities exposed by the application."""

from .notifiable import NotifiableDescriptor, NotifiableEntity, class_path
from .notifiable_notification import NotifiableNotification
from .notification import Notification
from .notification_event import NotificationEvent, NotificationEvents

__all__ = [
    "NotifiableDescriptor",
    "NotifiableEntity",
    "NotifiableNotification",
    "Notification",
    "NotificationEvent",
    "NotificationEvents",
    "class_path",
]
