"""SQLAlchemy model for the notifiable directory."""

from sqlalchemy import Column, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from notifyhub.infrastructure.database import Base


class NotifiableEntityModel(Base):
    """Directory row for one notifiable, keyed by its identifier and class."""

    __tablename__ = "notifiable"
    __table_args__ = (
        UniqueConstraint("identifier", "class_name", name="uq_notifiable_identifier_class"),
    )

    id = Column(Integer, primary_key=True, index=True)
    identifier = Column(String(255), nullable=False)
    class_name = Column(String(255), nullable=False)

    notifiable_notifications = relationship(
        "NotifiableNotificationModel",
        back_populates="notifiable_entity",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


__all__ = ["NotifiableEntityModel"]
