"""Built-in listeners for notification lifecycle events."""

from __future__ import annotations

import logging
from typing import Iterable

from notifyhub.domain.entities import NotificationEvent, NotificationEvents

from .dispatcher import NotificationEventDispatcher, notification_event_dispatcher

logger = logging.getLogger(__name__)


def log_notification_event(topic: str, event: NotificationEvent) -> None:
    """Listener writing every event to the module logger."""

    if event.notifiable is None:
        logger.info("[%s] notification %s", topic, event.notification.id)
    else:
        logger.info(
            "[%s] notification %s for %r",
            topic,
            event.notification.id,
            event.notifiable,
        )


def register_logging_listener(
    dispatcher: NotificationEventDispatcher = notification_event_dispatcher,
    topics: Iterable[str] = NotificationEvents.ALL,
) -> None:
    """Subscribe :func:`log_notification_event` to ``topics`` once."""

    for topic in topics:
        if log_notification_event not in dispatcher.listeners(topic):
            dispatcher.subscribe(topic, log_notification_event)


__all__ = ["log_notification_event", "register_logging_listener"]
