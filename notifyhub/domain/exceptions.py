"""Error kinds raised by the notification layer."""

from __future__ import annotations

from typing import Any


class NotificationError(Exception):
    """Base class for every error raised by the notification layer."""

    code = "NOTIFICATION_ERROR"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details: dict[str, Any] = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ConfigurationError(NotificationError):
    """The notifiable registry is missing or malformed."""

    code = "CONFIGURATION_ERROR"


class NotFoundError(NotificationError):
    """A notifiable, directory entry or assignment link does not exist."""

    code = "NOT_FOUND"


class AmbiguousResultError(NotificationError):
    """More than one assignment link matched a single lookup."""

    code = "AMBIGUOUS_RESULT"


__all__ = [
    "NotificationError",
    "ConfigurationError",
    "NotFoundError",
    "AmbiguousResultError",
]
