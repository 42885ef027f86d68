"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from notifyhub.infrastructure.database import Base
from notifyhub.utils import stored_now


class NotificationModel(Base):
    """Database representation of a notification, independent of recipients."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    subject = Column(String(4000), nullable=False)
    message = Column(Text, nullable=True)
    link = Column(String(4000), nullable=True)
    date = Column(DateTime(), nullable=False, default=stored_now)

    notifiable_notifications = relationship(
        "NotifiableNotificationModel",
        back_populates="notification",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


__all__ = ["NotificationModel"]
