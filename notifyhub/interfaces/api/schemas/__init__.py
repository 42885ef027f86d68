from .notifiable import (
    NotifiableDescriptorRead,
    NotifiableEntityRead,
    NotifiableReference,
)
from .notification import (
    NotificationAssignmentRequest,
    NotificationCountRead,
    NotificationCreate,
    NotificationRead,
    NotificationSeenRead,
    NotificationUpdate,
)

__all__ = [
    "NotifiableDescriptorRead",
    "NotifiableEntityRead",
    "NotifiableReference",
    "NotificationAssignmentRequest",
    "NotificationCountRead",
    "NotificationCreate",
    "NotificationRead",
    "NotificationSeenRead",
    "NotificationUpdate",
]
