"""Persistence helpers for notification assignments."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func
from sqlalchemy.exc import MultipleResultsFound
from sqlalchemy.orm import Session

from notifyhub.domain.entities import NotifiableNotification, Notification
from notifyhub.domain.exceptions import AmbiguousResultError, NotFoundError
from notifyhub.infrastructure.models import (
    NotifiableEntityModel,
    NotifiableNotificationModel,
    NotificationModel,
)

from .notification_repository import notification_to_entity


class NotifiableNotificationRepository:
    """Provide CRUD operations for assignment links."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, *, notifiable_entity_id: int, notification_id: int) -> NotifiableNotification:
        """Insert an unseen link inside a savepoint.

        A link that already exists for the pair raises
        :class:`sqlalchemy.exc.IntegrityError` once the savepoint is rolled
        back; the surrounding transaction stays usable.
        """

        model = NotifiableNotificationModel(
            notifiable_entity_id=notifiable_entity_id,
            notification_id=notification_id,
            seen=False,
        )
        with self.session.begin_nested():
            self.session.add(model)
        return self._to_entity(model)

    def find_one(
        self, *, notifiable_entity_id: int, notification_id: int
    ) -> NotifiableNotification | None:
        query = self.session.query(NotifiableNotificationModel).filter(
            NotifiableNotificationModel.notifiable_entity_id == notifiable_entity_id,
            NotifiableNotificationModel.notification_id == notification_id,
        )
        try:
            model = query.one_or_none()
        except MultipleResultsFound as exc:
            raise AmbiguousResultError(
                "More than one link exists between the notifiable and the notification",
                details={
                    "notifiable_entity_id": notifiable_entity_id,
                    "notification_id": notification_id,
                },
            ) from exc
        return self._to_entity(model) if model else None

    def delete_pair(self, *, notifiable_entity_id: int, notification_id: int) -> int:
        """Delete the links of one pair with a single statement."""

        self.session.flush()
        return (
            self.session.query(NotifiableNotificationModel)
            .filter(
                NotifiableNotificationModel.notifiable_entity_id == notifiable_entity_id,
                NotifiableNotificationModel.notification_id == notification_id,
            )
            .delete(synchronize_session="fetch")
        )

    def set_seen(self, link_id: int, seen: bool) -> NotifiableNotification:
        model = self.session.get(NotifiableNotificationModel, link_id)
        if model is None:
            raise NotFoundError(
                f"Notification link with id {link_id} not found",
                details={"link_id": link_id},
            )
        model.seen = seen
        self.session.flush()
        return self._to_entity(model)

    def list_with_notifications(
        self, *, identifier: str, class_name: str
    ) -> Sequence[tuple[NotifiableNotification, Notification]]:
        query = (
            self.session.query(NotifiableNotificationModel, NotificationModel)
            .join(
                NotificationModel,
                NotificationModel.id == NotifiableNotificationModel.notification_id,
            )
            .join(
                NotifiableEntityModel,
                NotifiableEntityModel.id == NotifiableNotificationModel.notifiable_entity_id,
            )
            .filter(
                NotifiableEntityModel.identifier == identifier,
                NotifiableEntityModel.class_name == class_name,
            )
            .order_by(NotifiableNotificationModel.id.asc())
        )
        return [
            (self._to_entity(link), notification_to_entity(notification))
            for link, notification in query.all()
        ]

    def count(self, *, identifier: str, class_name: str, seen: bool | None = None) -> int:
        query = (
            self.session.query(func.count(NotifiableNotificationModel.id))
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
        return int(query.scalar() or 0)

    @staticmethod
    def _to_entity(model: NotifiableNotificationModel) -> NotifiableNotification:
        return NotifiableNotification(
            id=model.id,
            notifiable_entity_id=model.notifiable_entity_id,
            notification_id=model.notification_id,
            seen=bool(model.seen),
        )


__all__ = ["NotifiableNotificationRepository"]
