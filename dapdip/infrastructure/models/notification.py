"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.sql import expression

from dapdip.infrastructure.database import Base
from dapdip.utils import now_in_app_naive_datetime

class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_recipient_is_read", "recipient_id", "is_read"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("user.id"), nullable=True)
    type = Column(String(50), nullable=False)
    content = Column(Text, nullable=True)
    is_read = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    priority = Column(String(10), nullable=False, default="NORMAL")
    is_actionable = Column(Boolean, nullable=False, default=False)
    action_label = Column(String(80), nullable=True)
    action_url = Column(String(500), nullable=True)
    image_url = Column(String(500), nullable=True)
    url = Column(String(500), nullable=True)
    group_id = Column(Integer, nullable=True, index=True)
    page_id = Column(Integer, nullable=True, index=True)
    # ``metadata`` is reserved on declarative classes.
    extra_data = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["NotificationModel"]
