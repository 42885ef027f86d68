"""Synchronous in-process dispatcher for notification lifecycle events."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, DefaultDict, List

from notifyhub.domain.entities import NotificationEvent

logger = logging.getLogger(__name__)

NotificationListener = Callable[[str, NotificationEvent], None]


class NotificationEventDispatcher:
    """Deliver events to the listeners subscribed to each topic.

    Listeners run on the calling thread in subscription order. An exception
    raised by a listener stops the delivery and reaches the publisher.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[NotificationListener]] = defaultdict(list)

    def subscribe(self, topic: str, listener: NotificationListener) -> None:
        """Register ``listener`` for events published on ``topic``."""

        self._listeners[topic].append(listener)

    def unsubscribe(self, topic: str, listener: NotificationListener) -> None:
        """Remove ``listener`` from ``topic``; unknown listeners are ignored."""

        listeners = self._listeners.get(topic)
        if not listeners or listener not in listeners:
            return
        listeners.remove(listener)
        if not listeners:
            self._listeners.pop(topic, None)

    def listeners(self, topic: str) -> list[NotificationListener]:
        return list(self._listeners.get(topic, ()))

    def publish(self, topic: str, event: NotificationEvent) -> None:
        """Call every listener of ``topic`` with ``event``."""

        listeners = self.listeners(topic)
        logger.debug(
            "Publishing %s for notification %s to %d listener(s)",
            topic,
            event.notification.id,
            len(listeners),
        )
        for listener in listeners:
            listener(topic, event)


notification_event_dispatcher = NotificationEventDispatcher()


__all__ = [
    "NotificationEventDispatcher",
    "NotificationListener",
    "notification_event_dispatcher",
]
