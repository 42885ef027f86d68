"""FastAPI dependency utilities."""

from fastapi import Depends
from sqlalchemy.orm import Session

from notifyhub.application.use_cases.notifications import NotificationManager
from notifyhub.infrastructure.database import get_db


def get_notification_manager(db: Session = Depends(get_db)) -> NotificationManager:
    """Return a notification manager bound to the request session."""

    return NotificationManager(db)
