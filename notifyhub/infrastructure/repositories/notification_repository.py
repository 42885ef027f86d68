"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy.orm import Session

from notifyhub.domain.entities import Notification
from notifyhub.domain.exceptions import NotFoundError
from notifyhub.infrastructure.models import (
    NotifiableEntityModel,
    NotifiableNotificationModel,
    NotificationModel,
)
from notifyhub.utils import from_stored_date, to_stored_date

_MUTABLE_FIELDS = frozenset({"subject", "message", "link", "date"})


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Changes are flushed so generated identifiers are available, but never
    committed; committing is left to the caller.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> Sequence[Notification]:
        query = self.session.query(NotificationModel).order_by(
            NotificationModel.date.desc(), NotificationModel.id.desc()
        )
        return [notification_to_entity(model) for model in query.all()]

    def list_for_notifiable(
        self,
        *,
        identifier: str,
        class_name: str,
        seen: bool | None = None,
    ) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .join(
                NotifiableNotificationModel,
                NotifiableNotificationModel.notification_id == NotificationModel.id,
            )
            .join(
                NotifiableEntityModel,
                NotifiableEntityModel.id == NotifiableNotificationModel.notifiable_entity_id,
            )
            .filter(
                NotifiableEntityModel.identifier == identifier,
                NotifiableEntityModel.class_name == class_name,
            )
        )
        if seen is not None:
            query = query.filter(NotifiableNotificationModel.seen == seen)
        query = query.order_by(NotificationModel.date.desc(), NotificationModel.id.desc())
        return [notification_to_entity(model) for model in query.all()]

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return notification_to_entity(model) if model else None

    def add(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.flush()
        return notification_to_entity(model)

    def update_fields(self, notification_id: int, **fields: Any) -> Notification:
        """Write only ``fields`` to the stored notification."""

        unknown = set(fields) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown notification fields: {', '.join(sorted(unknown))}")
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            raise NotFoundError(
                f"Notification with id {notification_id} not found",
                details={"notification_id": notification_id},
            )
        for name, value in fields.items():
            if name == "date":
                value = to_stored_date(value)
            setattr(model, name, value)
        self.session.flush()
        return notification_to_entity(model)

    def delete(self, notification_id: int) -> None:
        """Delete the notification and every assignment pointing at it."""

        self.session.flush()
        self.session.query(NotifiableNotificationModel).filter(
            NotifiableNotificationModel.notification_id == notification_id
        ).delete(synchronize_session="fetch")
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .delete(synchronize_session="fetch")
        )
        if not deleted:
            raise NotFoundError(
                f"Notification with id {notification_id} not found",
                details={"notification_id": notification_id},
            )

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.subject = notification.subject
        model.message = notification.message
        model.link = notification.link
        model.date = to_stored_date(notification.date)


def notification_to_entity(model: NotificationModel) -> Notification:
    return Notification(
        id=model.id,
        subject=model.subject,
        message=model.message,
        link=model.link,
        date=from_stored_date(model.date),
    )


__all__ = ["NotificationRepository", "notification_to_entity"]
