"""SQLAlchemy model for notification delivery traces."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from dapdip.infrastructure.database import Base
from dapdip.utils import now_in_app_naive_datetime


class DeliveryLogModel(Base):
    """Append-only record of a channel delivery attempt."""

    __tablename__ = "notification_delivery_log"

    id = Column(Integer, primary_key=True, index=True)
    notification_id = Column(
        Integer, ForeignKey("notification.id"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    channel = Column(String(10), nullable=False)
    event = Column(String(20), nullable=False)
    success = Column(Boolean, nullable=False, default=True)
    detail = Column(Text, nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["DeliveryLogModel"]
