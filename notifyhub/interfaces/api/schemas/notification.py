"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .notifiable import NotifiableReference


class NotificationCreate(BaseModel):
    """Payload used to create a notification and optionally assign it."""

    subject: str = Field(..., min_length=1, max_length=4000)
    message: str | None = None
    link: str | None = Field(default=None, max_length=4000)
    date: datetime | None = None
    notifiables: list[NotifiableReference] = Field(
        default_factory=list, description="Destinatarios a los que se asigna la notificación"
    )


class NotificationUpdate(BaseModel):
    """Fields that can be changed on an existing notification."""

    model_config = ConfigDict(extra="forbid")

    subject: str | None = Field(default=None, min_length=1, max_length=4000)
    message: str | None = None
    link: str | None = Field(default=None, max_length=4000)
    date: datetime | None = None


class NotificationAssignmentRequest(BaseModel):
    """Recipients to add to or remove from a notification."""

    notifiables: list[NotifiableReference] = Field(..., min_length=1)


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    subject: str
    message: str | None = None
    link: str | None = None
    date: datetime


class NotificationSeenRead(BaseModel):
    """Read state of one notification for one notifiable."""

    notification_id: int
    notifiable_id: int
    seen: bool


class NotificationCountRead(BaseModel):
    """Aggregated counters for the notifications of a notifiable."""

    all: int
    seen: int
    unseen: int


__all__ = [
    "NotificationAssignmentRequest",
    "NotificationCountRead",
    "NotificationCreate",
    "NotificationRead",
    "NotificationSeenRead",
    "NotificationUpdate",
]
