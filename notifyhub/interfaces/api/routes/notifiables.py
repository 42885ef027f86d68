"""Endpoints exposing the notifications of a single notifiable."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from notifyhub.application.use_cases.notifications import NotificationManager
from notifyhub.domain.entities import NotifiableEntity
from notifyhub.domain.exceptions import NotificationError
from notifyhub.interfaces.api.dependencies import get_notification_manager
from notifyhub.interfaces.api.routes_helpers import (
    get_notification_or_404,
    notifiable_to_reference,
    notification_to_schema,
    to_http_exception,
)
from notifyhub.interfaces.api.schemas import (
    NotifiableDescriptorRead,
    NotifiableEntityRead,
    NotificationCountRead,
    NotificationRead,
    NotificationSeenRead,
)

router = APIRouter(prefix="/notifiables", tags=["notifiables"])


@router.get("/", response_model=list[NotifiableDescriptorRead])
def list_notifiable_kinds(
    manager: NotificationManager = Depends(get_notification_manager),
) -> list[NotifiableDescriptorRead]:
    """Devuelve los tipos de destinatarios registrados."""

    try:
        descriptors = manager.list_descriptors()
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return [
        NotifiableDescriptorRead(
            name=descriptor.name,
            class_name=descriptor.class_path,
            identifiers=list(descriptor.identifiers),
        )
        for descriptor in descriptors.values()
    ]


@router.get("/{entity_id}", response_model=NotifiableEntityRead)
def get_notifiable(
    entity_id: int,
    manager: NotificationManager = Depends(get_notification_manager),
) -> NotifiableEntityRead:
    """Devuelve la entrada del directorio y el destinatario que representa."""

    entity = _get_entity_or_404(manager, entity_id)
    try:
        notifiable = manager.reverse_resolve(entity)
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return NotifiableEntityRead(
        id=entity.id,
        identifier=entity.identifier,
        class_name=entity.class_name,
        notifiable=(
            notifiable_to_reference(manager, notifiable) if notifiable is not None else None
        ),
    )


@router.get("/{entity_id}/notifications", response_model=list[NotificationRead])
def list_notifiable_notifications(
    entity_id: int,
    seen: bool | None = Query(default=None),
    manager: NotificationManager = Depends(get_notification_manager),
) -> list[NotificationRead]:
    """Lista las notificaciones del destinatario, filtrando por estado de lectura."""

    notifiable = _get_notifiable_or_404(manager, entity_id)
    notifications = manager.list_notifications(notifiable, seen=seen)
    return [notification_to_schema(notification) for notification in notifications]


@router.get("/{entity_id}/notifications/count", response_model=NotificationCountRead)
def count_notifiable_notifications(
    entity_id: int,
    manager: NotificationManager = Depends(get_notification_manager),
) -> NotificationCountRead:
    """Devuelve los contadores de notificaciones leídas y pendientes."""

    notifiable = _get_notifiable_or_404(manager, entity_id)
    return _counts(manager, notifiable)


@router.post("/{entity_id}/notifications/seen", response_model=NotificationCountRead)
def mark_all_notifications_seen(
    entity_id: int,
    manager: NotificationManager = Depends(get_notification_manager),
) -> NotificationCountRead:
    """Marca como leídas todas las notificaciones del destinatario."""

    notifiable = _get_notifiable_or_404(manager, entity_id)
    manager.mark_all_seen(notifiable, commit=True)
    return _counts(manager, notifiable)


@router.post(
    "/{entity_id}/notifications/{notification_id}/seen",
    response_model=NotificationSeenRead,
)
def mark_notification_seen(
    entity_id: int,
    notification_id: int,
    manager: NotificationManager = Depends(get_notification_manager),
) -> NotificationSeenRead:
    """Marca una notificación como leída para el destinatario."""

    return _set_seen(manager, entity_id, notification_id, seen=True)


@router.post(
    "/{entity_id}/notifications/{notification_id}/unseen",
    response_model=NotificationSeenRead,
)
def mark_notification_unseen(
    entity_id: int,
    notification_id: int,
    manager: NotificationManager = Depends(get_notification_manager),
) -> NotificationSeenRead:
    """Marca una notificación como pendiente para el destinatario."""

    return _set_seen(manager, entity_id, notification_id, seen=False)


def _set_seen(
    manager: NotificationManager, entity_id: int, notification_id: int, *, seen: bool
) -> NotificationSeenRead:
    notifiable = _get_notifiable_or_404(manager, entity_id)
    notification = get_notification_or_404(manager, notification_id)
    try:
        if seen:
            manager.mark_seen(notifiable, notification, commit=True)
        else:
            manager.mark_unseen(notifiable, notification, commit=True)
        current = manager.is_seen(notifiable, notification)
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return NotificationSeenRead(
        notification_id=notification_id, notifiable_id=entity_id, seen=current
    )


def _counts(manager: NotificationManager, notifiable: object) -> NotificationCountRead:
    return NotificationCountRead(
        all=manager.count_all(notifiable),
        seen=manager.count_seen(notifiable),
        unseen=manager.count_unseen(notifiable),
    )


def _get_entity_or_404(manager: NotificationManager, entity_id: int) -> NotifiableEntity:
    entity = manager.get_entity(entity_id)
    if entity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Destinatario no encontrado"
        )
    return entity


def _get_notifiable_or_404(manager: NotificationManager, entity_id: int) -> object:
    entity = _get_entity_or_404(manager, entity_id)
    try:
        notifiable = manager.reverse_resolve(entity)
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    if notifiable is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Destinatario no encontrado"
        )
    return notifiable


__all__ = ["router"]
