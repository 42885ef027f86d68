"""Facade coordinating notifications, their recipients and lifecycle events."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notifyhub.domain.entities import (
    NotifiableDescriptor,
    NotifiableEntity,
    NotifiableNotification,
    Notification,
    NotificationEvent,
    NotificationEvents,
)
from notifyhub.domain.exceptions import AmbiguousResultError, NotFoundError
from notifyhub.infrastructure.discovery import NotifiableDiscovery, notifiable_discovery
from notifyhub.infrastructure.notifiable_provider import (
    NotifiableProvider,
    SqlAlchemyNotifiableProvider,
)
from notifyhub.infrastructure.notifications import (
    NotificationEventDispatcher,
    notification_event_dispatcher,
)
from notifyhub.infrastructure.repositories import (
    NotifiableNotificationRepository,
    NotifiableRepository,
    NotificationRepository,
)

from .directory import NotifiableDirectory
from .identity import IdentityResolver

logger = logging.getLogger(__name__)

_LINK_NOT_FOUND = "The link between the notifiable and the notification has not been found"

_PendingEvent = tuple[str, NotificationEvent]


class NotificationManager:
    """Create notifications, assign them to notifiables and track read state.

    One manager wraps one request-scoped SQLAlchemy session. Mutating
    operations accept ``commit``; events are published after the flush and,
    when ``commit`` is true, after the commit. Inside :meth:`unit_of_work`
    the ``commit`` flags are ignored and events wait for the final commit.
    """

    def __init__(
        self,
        session: Session,
        *,
        discovery: NotifiableDiscovery | None = None,
        dispatcher: NotificationEventDispatcher | None = None,
        provider: NotifiableProvider | None = None,
    ) -> None:
        self.session = session
        self.resolver = IdentityResolver(
            discovery if discovery is not None else notifiable_discovery
        )
        self.dispatcher = (
            dispatcher if dispatcher is not None else notification_event_dispatcher
        )
        self.directory = NotifiableDirectory(
            session,
            self.resolver,
            provider if provider is not None else SqlAlchemyNotifiableProvider(session),
        )
        self.notification_repository = NotificationRepository(session)
        self.notifiable_repository = NotifiableRepository(session)
        self.link_repository = NotifiableNotificationRepository(session)
        self._unit_of_work_depth = 0
        self._pending_events: list[_PendingEvent] = []

    @contextmanager
    def unit_of_work(self) -> Iterator["NotificationManager"]:
        """Group several operations into one commit.

        The session is committed once when the outermost block exits cleanly
        and queued events are published afterwards. On error the session is
        rolled back and queued events are dropped.
        """

        self._unit_of_work_depth += 1
        try:
            yield self
        except BaseException:
            self._unit_of_work_depth -= 1
            if not self._unit_of_work_depth:
                self._pending_events.clear()
                self.session.rollback()
            raise
        self._unit_of_work_depth -= 1
        if not self._unit_of_work_depth:
            self.session.commit()
            events, self._pending_events = self._pending_events, []
            self._publish(events)

    def list_descriptors(self) -> Mapping[str, NotifiableDescriptor]:
        return self.resolver.list_descriptors()

    def describe(self, name: str) -> NotifiableDescriptor:
        return self.resolver.describe(name)

    def name_of(self, notifiable: object) -> str | None:
        return self.resolver.name_of(notifiable)

    def resolve_key(self, notifiable: object) -> str:
        return self.resolver.resolve_key(notifiable)

    def get_or_create_entity(self, notifiable: object) -> NotifiableEntity:
        return self.directory.get_or_create(notifiable, commit=not self._unit_of_work_depth)

    def get_entity(self, entity_id: int) -> NotifiableEntity | None:
        return self.directory.get_by_id(entity_id)

    def reverse_resolve(self, entity: NotifiableEntity) -> object | None:
        return self.directory.reverse_resolve(entity)

    def resolve_reference(self, name: str, identifiers: Mapping[str, Any]) -> object:
        return self.directory.resolve_reference(name, identifiers)

    def create_notification(
        self,
        subject: str,
        message: str | None = None,
        link: str | None = None,
        *,
        date: datetime | None = None,
        commit: bool = False,
    ) -> Notification:
        notification = self.notification_repository.add(
            Notification(id=None, subject=subject, message=message, link=link, date=date)
        )
        logger.debug("Created notification %s", notification.id)
        self._finish([(NotificationEvents.CREATED, NotificationEvent(notification))], commit)
        return notification

    def get_notification(self, notification_id: int) -> Notification | None:
        return self.notification_repository.get(notification_id)

    def list_all(self) -> Sequence[Notification]:
        return self.notification_repository.list()

    def list_notifications(
        self, notifiable: object, *, seen: bool | None = None
    ) -> Sequence[Notification]:
        """Return the notifications assigned to ``notifiable``, newest first."""

        identifier, class_name = self.resolver.identity_of(notifiable)
        return self.notification_repository.list_for_notifiable(
            identifier=identifier, class_name=class_name, seen=seen
        )

    def set_subject(
        self, notification: Notification, subject: str, *, commit: bool = False
    ) -> Notification:
        return self._modify(notification, commit, subject=subject)

    def set_message(
        self, notification: Notification, message: str | None, *, commit: bool = False
    ) -> Notification:
        return self._modify(notification, commit, message=message)

    def set_link(
        self, notification: Notification, link: str | None, *, commit: bool = False
    ) -> Notification:
        return self._modify(notification, commit, link=link)

    def set_date(
        self, notification: Notification, date: datetime, *, commit: bool = False
    ) -> Notification:
        if date is None:
            raise ValueError("A notification date is required")
        return self._modify(notification, commit, date=date)

    def delete_notification(self, notification: Notification, *, commit: bool = False) -> None:
        """Delete ``notification`` together with all of its assignments."""

        self.notification_repository.delete(_require_id(notification))
        logger.debug("Deleted notification %s", notification.id)
        self._finish([(NotificationEvents.DELETED, NotificationEvent(notification))], commit)

    def assign(
        self,
        notifiables: Iterable[object],
        notification: Notification,
        *,
        commit: bool = False,
    ) -> None:
        """Make ``notification`` visible, unseen, to each of ``notifiables``.

        Notifiables that already hold the notification keep their link and
        read state and produce no ``assigned`` event.
        """

        notification_id = _require_id(notification)
        events: list[_PendingEvent] = []
        for notifiable in notifiables:
            entity = self.get_or_create_entity(notifiable)
            if self._insert_link(entity, notification_id):
                events.append(
                    (NotificationEvents.ASSIGNED, NotificationEvent(notification, notifiable))
                )
        self._finish(events, commit)

    def unassign(
        self,
        notifiables: Iterable[object],
        notification: Notification,
        *,
        commit: bool = False,
    ) -> None:
        """Remove the assignment of ``notification`` from each of ``notifiables``.

        Notifiables without an assignment are skipped silently but still
        produce a ``removed`` event.
        """

        notification_id = _require_id(notification)
        events: list[_PendingEvent] = []
        for notifiable in notifiables:
            entity = self.directory.find(notifiable)
            if entity is not None:
                self.link_repository.delete_pair(
                    notifiable_entity_id=entity.id, notification_id=notification_id
                )
            events.append(
                (NotificationEvents.REMOVED, NotificationEvent(notification, notifiable))
            )
        self._finish(events, commit)

    def find_link(
        self, notifiable: object, notification: Notification
    ) -> NotifiableNotification | None:
        entity = self.directory.find(notifiable)
        if entity is None:
            return None
        try:
            return self.link_repository.find_one(
                notifiable_entity_id=entity.id, notification_id=_require_id(notification)
            )
        except AmbiguousResultError:
            logger.error(
                "Duplicate links between directory entry %s and notification %s",
                entity.id,
                notification.id,
            )
            raise

    def mark_seen(
        self, notifiable: object, notification: Notification, *, commit: bool = False
    ) -> None:
        self._set_seen(notifiable, notification, True, commit)

    def mark_unseen(
        self, notifiable: object, notification: Notification, *, commit: bool = False
    ) -> None:
        self._set_seen(notifiable, notification, False, commit)

    def mark_all_seen(self, notifiable: object, *, commit: bool = False) -> None:
        """Mark every notification of ``notifiable`` as seen."""

        identifier, class_name = self.resolver.identity_of(notifiable)
        events: list[_PendingEvent] = []
        for link, notification in self.link_repository.list_with_notifications(
            identifier=identifier, class_name=class_name
        ):
            self.link_repository.set_seen(link.id, True)
            events.append((NotificationEvents.SEEN, NotificationEvent(notification, notifiable)))
        self._finish(events, commit)

    def is_seen(self, notifiable: object, notification: Notification) -> bool:
        return self._require_link(notifiable, notification).seen

    def count_all(self, notifiable: object) -> int:
        return self._count(notifiable, None)

    def count_seen(self, notifiable: object) -> int:
        return self._count(notifiable, True)

    def count_unseen(self, notifiable: object) -> int:
        return self._count(notifiable, False)

    def notifiables_for(
        self, notification: Notification, *, seen: bool | None = None
    ) -> list[object]:
        """Return the live recipients of ``notification``.

        Directory entries whose notifiable no longer exists are left out.
        """

        recipients: list[object] = []
        for entity in self.notifiable_repository.list_by_notification(
            _require_id(notification), seen=seen
        ):
            notifiable = self.directory.reverse_resolve(entity)
            if notifiable is None:
                logger.debug("Directory entry %s no longer resolves; skipped", entity.id)
                continue
            recipients.append(notifiable)
        return recipients

    def _modify(self, notification: Notification, commit: bool, **fields: Any) -> Notification:
        updated = self.notification_repository.update_fields(_require_id(notification), **fields)
        self._finish([(NotificationEvents.MODIFIED, NotificationEvent(updated))], commit)
        return updated

    def _insert_link(self, entity: NotifiableEntity, notification_id: int) -> bool:
        """Link ``entity`` to the notification; ``False`` when the link already existed."""

        existing = self.link_repository.find_one(
            notifiable_entity_id=entity.id, notification_id=notification_id
        )
        if existing is not None:
            logger.debug(
                "Directory entry %s already holds notification %s", entity.id, notification_id
            )
            return False

        try:
            self.link_repository.create(
                notifiable_entity_id=entity.id, notification_id=notification_id
            )
        except IntegrityError:
            existing = self.link_repository.find_one(
                notifiable_entity_id=entity.id, notification_id=notification_id
            )
            if existing is None:
                raise
            logger.info(
                "Link %s between directory entry %s and notification %s was created concurrently",
                existing.id,
                entity.id,
                notification_id,
            )
            return False
        return True

    def _require_link(
        self, notifiable: object, notification: Notification
    ) -> NotifiableNotification:
        link = self.find_link(notifiable, notification)
        if link is None:
            raise NotFoundError(
                _LINK_NOT_FOUND,
                details={"notification_id": notification.id},
            )
        return link

    def _set_seen(
        self, notifiable: object, notification: Notification, seen: bool, commit: bool
    ) -> None:
        link = self._require_link(notifiable, notification)
        self.link_repository.set_seen(link.id, seen)
        topic = NotificationEvents.SEEN if seen else NotificationEvents.UNSEEN
        self._finish([(topic, NotificationEvent(notification, notifiable))], commit)

    def _count(self, notifiable: object, seen: bool | None) -> int:
        identifier, class_name = self.resolver.identity_of(notifiable)
        return self.link_repository.count(
            identifier=identifier, class_name=class_name, seen=seen
        )

    def _finish(self, events: list[_PendingEvent], commit: bool) -> None:
        if self._unit_of_work_depth:
            self._pending_events.extend(events)
            return
        if commit:
            self.session.commit()
        self._publish(events)

    def _publish(self, events: Iterable[_PendingEvent]) -> None:
        for topic, event in events:
            self.dispatcher.publish(topic, event)


def _require_id(notification: Notification) -> int:
    if notification.id is None:
        raise ValueError("The notification has not been persisted yet")
    return notification.id


__all__ = ["NotificationManager"]
