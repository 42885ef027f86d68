"""Endpoints to manage notifications and their recipients."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from notifyhub.application.use_cases.notifications import NotificationManager
from notifyhub.domain.exceptions import NotificationError
from notifyhub.interfaces.api.dependencies import get_notification_manager
from notifyhub.interfaces.api.routes_helpers import (
    get_notification_or_404,
    notifiable_to_reference,
    notification_to_schema,
    resolve_references,
    to_http_exception,
)
from notifyhub.interfaces.api.schemas import (
    NotifiableReference,
    NotificationAssignmentRequest,
    NotificationCreate,
    NotificationRead,
    NotificationUpdate,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=list[NotificationRead])
def list_notifications(
    manager: NotificationManager = Depends(get_notification_manager),
) -> list[NotificationRead]:
    """Devuelve todas las notificaciones registradas."""

    return [notification_to_schema(notification) for notification in manager.list_all()]


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    manager: NotificationManager = Depends(get_notification_manager),
) -> NotificationRead:
    """Crea una notificación y la asigna a los destinatarios indicados."""

    try:
        with manager.unit_of_work():
            notification = manager.create_notification(
                payload.subject,
                payload.message,
                payload.link,
                date=payload.date,
            )
            if payload.notifiables:
                manager.assign(resolve_references(manager, payload.notifiables), notification)
    except (NotificationError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    return notification_to_schema(notification)


@router.get("/{notification_id}", response_model=NotificationRead)
def get_notification(
    notification_id: int,
    manager: NotificationManager = Depends(get_notification_manager),
) -> NotificationRead:
    """Devuelve una notificación por su identificador."""

    return notification_to_schema(get_notification_or_404(manager, notification_id))


@router.patch("/{notification_id}", response_model=NotificationRead)
def update_notification(
    notification_id: int,
    payload: NotificationUpdate,
    manager: NotificationManager = Depends(get_notification_manager),
) -> NotificationRead:
    """Actualiza los campos enviados de una notificación."""

    notification = get_notification_or_404(manager, notification_id)
    fields = payload.model_fields_set
    if "subject" in fields and payload.subject is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="El asunto es obligatorio"
        )
    if "date" in fields and payload.date is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="La fecha es obligatoria"
        )

    try:
        with manager.unit_of_work():
            if "subject" in fields:
                notification = manager.set_subject(notification, payload.subject)
            if "message" in fields:
                notification = manager.set_message(notification, payload.message)
            if "link" in fields:
                notification = manager.set_link(notification, payload.link)
            if "date" in fields:
                notification = manager.set_date(notification, payload.date)
    except (NotificationError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    return notification_to_schema(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: int,
    manager: NotificationManager = Depends(get_notification_manager),
) -> Response:
    """Elimina una notificación y todas sus asignaciones."""

    notification = get_notification_or_404(manager, notification_id)
    try:
        manager.delete_notification(notification, commit=True)
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{notification_id}/assignments", response_model=list[NotifiableReference])
def assign_notification(
    notification_id: int,
    payload: NotificationAssignmentRequest,
    manager: NotificationManager = Depends(get_notification_manager),
) -> list[NotifiableReference]:
    """Asigna la notificación a nuevos destinatarios."""

    notification = get_notification_or_404(manager, notification_id)
    try:
        with manager.unit_of_work():
            manager.assign(resolve_references(manager, payload.notifiables), notification)
    except (NotificationError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    return _recipients(manager, notification_id, seen=None)


@router.post("/{notification_id}/removals", response_model=list[NotifiableReference])
def unassign_notification(
    notification_id: int,
    payload: NotificationAssignmentRequest,
    manager: NotificationManager = Depends(get_notification_manager),
) -> list[NotifiableReference]:
    """Retira la notificación de los destinatarios indicados."""

    notification = get_notification_or_404(manager, notification_id)
    try:
        with manager.unit_of_work():
            manager.unassign(resolve_references(manager, payload.notifiables), notification)
    except (NotificationError, ValueError) as exc:
        raise to_http_exception(exc) from exc
    return _recipients(manager, notification_id, seen=None)


@router.get("/{notification_id}/notifiables", response_model=list[NotifiableReference])
def list_notification_recipients(
    notification_id: int,
    seen: bool | None = Query(default=None),
    manager: NotificationManager = Depends(get_notification_manager),
) -> list[NotifiableReference]:
    """Lista los destinatarios de la notificación, filtrando por estado de lectura."""

    return _recipients(manager, notification_id, seen=seen)


def _recipients(
    manager: NotificationManager, notification_id: int, *, seen: bool | None
) -> list[NotifiableReference]:
    notification = get_notification_or_404(manager, notification_id)
    try:
        notifiables = manager.notifiables_for(notification, seen=seen)
    except NotificationError as exc:
        raise to_http_exception(exc) from exc
    return [notifiable_to_reference(manager, notifiable) for notifiable in notifiables]


__all__ = ["router"]
