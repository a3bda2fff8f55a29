"""SQLAlchemy model for registered push devices."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from dapdip.infrastructure.database import Base
from dapdip.utils import now_in_app_naive_datetime


class PushDeviceModel(Base):
    """Push target registered by a user."""

    __tablename__ = "push_device"
    __table_args__ = (
        UniqueConstraint("user_id", "token", name="uq_push_device_user_token"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    token = Column(String(512), nullable=False)
    platform = Column(String(10), nullable=False)
    name = Column(String(120), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    last_active_at = Column(DateTime(), nullable=True)


__all__ = ["PushDeviceModel"]
