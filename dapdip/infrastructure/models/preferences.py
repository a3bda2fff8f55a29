"""SQLAlchemy models for notification preferences."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)

from dapdip.infrastructure.database import Base
from dapdip.utils import now_in_app_naive_datetime


class NotificationPreferencesModel(Base):
    """Channel toggles and quiet hours stored once per user."""

    __tablename__ = "notification_preferences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("user.id"), nullable=False, unique=True, index=True
    )
    in_app_enabled = Column(Boolean, nullable=False, default=True)
    email_enabled = Column(Boolean, nullable=False, default=False)
    push_enabled = Column(Boolean, nullable=False, default=True)
    quiet_hours_enabled = Column(Boolean, nullable=False, default=False)
    quiet_hours_start = Column(String(5), nullable=True)
    quiet_hours_end = Column(String(5), nullable=True)
    timezone = Column(String(64), nullable=True)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


class CategoryPreferenceModel(Base):
    """Per-category opt-outs of a user."""

    __tablename__ = "notification_category_preference"
    __table_args__ = (
        UniqueConstraint("user_id", "category", name="uq_category_preference_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    category = Column(String(20), nullable=False)
    in_app_enabled = Column(Boolean, nullable=False, default=True)
    email_enabled = Column(Boolean, nullable=False, default=True)
    push_enabled = Column(Boolean, nullable=False, default=True)
    mute_all = Column(Boolean, nullable=False, default=False)



class GroupPreferenceModel(Base):
    """Per-group notification switches of a user."""

    __tablename__ = "notification_group_preference"
    __table_args__ = (
        UniqueConstraint("user_id", "group_id", name="uq_group_preference_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    group_id = Column(Integer, nullable=False, index=True)
    mute_all = Column(Boolean, nullable=False, default=False)
    posts_enabled = Column(Boolean, nullable=False, default=True)
    comments_enabled = Column(Boolean, nullable=False, default=True)
    events_enabled = Column(Boolean, nullable=False, default=True)
    polls_enabled = Column(Boolean, nullable=False, default=True)
    mentions_enabled = Column(Boolean, nullable=False, default=True)
    announcements_only = Column(Boolean, nullable=False, default=False)


__all__ = [
    "CategoryPreferenceModel",
    "GroupPreferenceModel",
    "NotificationPreferencesModel",
]
