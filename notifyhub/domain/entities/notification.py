"""Domain entity representing a notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Notification:
    """Message that can be assigned to any number of notifiables."""

    id: int | None
    subject: str
    message: str | None = None
    link: str | None = None
    date: datetime | None = None


__all__ = ["Notification"]
