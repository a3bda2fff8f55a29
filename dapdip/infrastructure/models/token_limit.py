"""SQLAlchemy models for token budgets and their usage history."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
)

from dapdip.infrastructure.database import Base
from dapdip.utils import now_in_app_naive_datetime


class TokenLimitModel(Base):
    """Token budget of a single user."""

    __tablename__ = "ai_token_limit"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("user.id"), nullable=False, unique=True, index=True
    )
    tier = Column(String(20), nullable=False, default="FREE")
    limit = Column("daily_limit", Integer, nullable=False, default=150)
    usage = Column(Integer, nullable=False, default=0)
    reset_at = Column(DateTime(), nullable=False)
    monthly_allocation = Column(Integer, nullable=False, default=5000)
    lifetime_usage = Column(Integer, nullable=False, default=0)
    previous_month_carry = Column(Integer, nullable=False, default=0)
    bonus_tokens = Column(Integer, nullable=False, default=0)
    subscription_period = Column(String(20), nullable=False, default="MONTHLY")
    subscription_started_at = Column(DateTime(), nullable=True)
    subscription_ends_at = Column(DateTime(), nullable=True)
    preferred_model = Column(String(60), nullable=False, default="AUTO")
    last_activity = Column(DateTime(), nullable=True)


class TokenUsageRecordModel(Base):
    """Append-only usage entry linked to a token budget."""

    __tablename__ = "ai_token_usage"

    id = Column(Integer, primary_key=True, index=True)
    token_limit_id = Column(
        Integer, ForeignKey("ai_token_limit.id"), nullable=False, index=True
    )
    operation_type = Column(String(60), nullable=False)
    tokens_used = Column(Integer, nullable=False)
    model = Column(String(60), nullable=False)
    endpoint = Column(String(120), nullable=True)
    feature_area = Column(String(60), nullable=True)
    prompt_tokens = Column(Integer, nullable=True)
    completion_tokens = Column(Integer, nullable=True)
    success = Column(Boolean, nullable=False, default=True)
    error_code = Column(String(60), nullable=True)
    response_time = Column(Float, nullable=True)
    cost_multiplier = Column(Float, nullable=False, default=1.0)
    extra_data = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(
        DateTime(), nullable=False, default=now_in_app_naive_datetime, index=True
    )


__all__ = ["TokenLimitModel", "TokenUsageRecordModel"]
