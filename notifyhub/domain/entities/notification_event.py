"""Lifecycle events emitted for notifications."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .notification import Notification


class NotificationEvents:
    """Topic names published by the notification manager."""

    CREATED: Final[str] = "notification.created"
    ASSIGNED: Final[str] = "notification.assigned"
    REMOVED: Final[str] = "notification.removed"
    DELETED: Final[str] = "notification.deleted"
    SEEN: Final[str] = "notification.seen"
    UNSEEN: Final[str] = "notification.unseen"
    MODIFIED: Final[str] = "notification.modified"

    ALL: Final[tuple[str, ...]] = (
        CREATED,
        ASSIGNED,
        REMOVED,
        DELETED,
        SEEN,
        UNSEEN,
        MODIFIED,
    )


@dataclass(frozen=True)
class NotificationEvent:
    """Payload delivered to listeners; ``notifiable`` is set for per-recipient events."""

    notification: Notification
    notifiable: object | None = None


__all__ = ["NotificationEvent", "NotificationEvents"]
