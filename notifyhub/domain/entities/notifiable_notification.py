"""Domain entity linking a notification to one of its recipients."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class NotifiableNotification:
    """Per-recipient assignment carrying the read state of a notification."""

    id: int | None
    notifiable_entity_id: int
    notification_id: int
    seen: bool = False


__all__ = ["NotifiableNotification"]
