"""Persistence layer for the notifiable directory."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from notifyhub.domain.entities import NotifiableEntity
from notifyhub.infrastructure.models import NotifiableEntityModel, NotifiableNotificationModel


class NotifiableRepository:
    """Provide lookup and creation of directory rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, entity_id: int) -> NotifiableEntity | None:
        model = self.session.get(NotifiableEntityModel, entity_id)
        return self._to_entity(model) if model else None

    def get_by_identifier(self, *, identifier: str, class_name: str) -> NotifiableEntity | None:
        model = (
            self.session.query(NotifiableEntityModel)
            .filter(
                NotifiableEntityModel.identifier == identifier,
                NotifiableEntityModel.class_name == class_name,
            )
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, *, identifier: str, class_name: str) -> NotifiableEntity:
        """Insert a directory row inside a savepoint.

        A duplicate ``(identifier, class_name)`` pair raises
        :class:`sqlalchemy.exc.IntegrityError` after the savepoint has been
        rolled back, leaving the surrounding transaction usable.

        The savepoint only nests when the driver has already begun the
        session transaction. Plain pysqlite starts a transaction at the
        SAVEPOINT and commits it at RELEASE; the SQLite listeners in
        :mod:`notifyhub.infrastructure.database` emit ``BEGIN`` up front so
        the row stays part of the caller's transaction.
        """

        model = NotifiableEntityModel(identifier=identifier, class_name=class_name)
        with self.session.begin_nested():
            self.session.add(model)
        return self._to_entity(model)

    def list_by_notification(
        self, notification_id: int, *, seen: bool | None = None
    ) -> Sequence[NotifiableEntity]:
        query = (
            self.session.query(NotifiableEntityModel)
            .join(
                NotifiableNotificationModel,
                NotifiableNotificationModel.notifiable_entity_id == NotifiableEntityModel.id,
            )
            .filter(NotifiableNotificationModel.notification_id == notification_id)
        )
        if seen is not None:
            query = query.filter(NotifiableNotificationModel.seen == seen)
        query = query.order_by(NotifiableEntityModel.id.asc())
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: NotifiableEntityModel) -> NotifiableEntity:
        return NotifiableEntity(
            id=model.id,
            identifier=model.identifier,
            class_name=model.class_name,
        )


__all__ = ["NotifiableRepository"]
