"""Notification management: identity resolution, directory and assignments."""

from .directory import NotifiableDirectory
from .identity import KEY_SEPARATOR, IdentityResolver, join_key, split_key
from .manager import NotificationManager

__all__ = [
    "IdentityResolver",
    "KEY_SEPARATOR",
    "NotifiableDirectory",
    "NotificationManager",
    "join_key",
    "split_key",
]
