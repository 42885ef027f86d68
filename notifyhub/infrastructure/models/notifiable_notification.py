"""SQLAlchemy model for notification assignments."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from notifyhub.infrastructure.database import Base


class NotifiableNotificationModel(Base):
    """Link between a directory row and a notification with its read state."""

    __tablename__ = "notifiable_notification"
    __table_args__ = (
        UniqueConstraint(
            "notifiable_entity_id",
            "notification_id",
            name="uq_notifiable_notification_pair",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    notifiable_entity_id = Column(
        Integer,
        ForeignKey("notifiable.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    notification_id = Column(
        Integer,
        ForeignKey("notification.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    seen = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )

    notifiable_entity = relationship(
        "NotifiableEntityModel",
        back_populates="notifiable_notifications",
    )
    notification = relationship(
        "NotificationModel",
        back_populates="notifiable_notifications",
    )


__all__ = ["NotifiableNotificationModel"]
