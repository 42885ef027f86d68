"""Helper utilities shared across API route handlers."""

from fastapi import HTTPException, status

from notifyhub.application.use_cases.notifications import NotificationManager
from notifyhub.domain.entities import Notification
from notifyhub.domain.exceptions import (
    AmbiguousResultError,
    ConfigurationError,
    NotFoundError,
    NotificationError,
)
from notifyhub.interfaces.api.schemas import NotifiableReference, NotificationRead

_STATUS_BY_ERROR: tuple[tuple[type[NotificationError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AmbiguousResultError, status.HTTP_409_CONFLICT),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def to_http_exception(exc: Exception) -> HTTPException:
    """Translate a domain or validation error into an ``HTTPException``."""

    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id,
        subject=notification.subject,
        message=notification.message,
        link=notification.link,
        date=notification.date,
    )


def notifiable_to_reference(
    manager: NotificationManager, notifiable: object
) -> NotifiableReference:
    """Describe a live notifiable by its registered name and identifiers."""

    descriptor = manager.resolver.descriptor_for(notifiable)
    return NotifiableReference(
        name=descriptor.name,
        identifiers=dict(zip(descriptor.identifiers, descriptor.identifier_values(notifiable))),
    )


def resolve_references(
    manager: NotificationManager, references: list[NotifiableReference]
) -> list[object]:
    return [
        manager.resolve_reference(reference.name, reference.identifiers)
        for reference in references
    ]


def get_notification_or_404(manager: NotificationManager, notification_id: int) -> Notification:
    notification = manager.get_notification(notification_id)
    if notification is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notificación no encontrada"
        )
    return notification
