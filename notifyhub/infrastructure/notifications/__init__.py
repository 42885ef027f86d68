"""Lifecycle event helpers for the infrastructure layer."""

from .dispatcher import (
    NotificationEventDispatcher,
    NotificationListener,
    notification_event_dispatcher,
)
from .listeners import log_notification_event, register_logging_listener

__all__ = [
    "NotificationEventDispatcher",
    "NotificationListener",
    "notification_event_dispatcher",
    "log_notification_event",
    "register_logging_listener",
]
