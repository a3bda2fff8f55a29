"""Schemas for the token ledger endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from dapdip.domain.entities import SubscriptionPeriod, TokenTier


class TokenSummaryRead(BaseModel):
    tier: TokenTier
    limit: int
    usage: int
    remaining: int
    reset_at: datetime
    monthly_allocation: int
    lifetime_usage: int
    previous_month_carry: int
    bonus_tokens: int
    preferred_model: str
    subscription_period: SubscriptionPeriod
    subscription_ends_at: datetime | None = None


class TierUpgradeRequest(BaseModel):
    tier: TokenTier
    bonus_tokens: int = Field(default=0, ge=0)
    reset: Literal["none", "immediate"] = "none"
    subscription_period: SubscriptionPeriod | None = None


class BonusTokensRequest(BaseModel):
    user_id: int = Field(..., ge=1)
    amount: int = Field(..., gt=0)
    reason: str | None = Field(default=None, max_length=255)


class UsageDayRead(BaseModel):
    date: str
    tokens: int
    calls: int
    avg_response_time: float
    success_rate: float


class UsageStatsRead(BaseModel):
    timeframe: str
    total_tokens: int
    total_calls: int
    by_model: dict[str, int]
    by_feature_area: dict[str, int]
    by_endpoint: dict[str, int]
    by_operation_type: dict[str, int]
    by_day: list[UsageDayRead]
    avg_response_time: float | None = None
    success_rate: float | None = None
    peak_hour: int | None = None


__all__ = [
    "BonusTokensRequest",
    "TierUpgradeRequest",
    "TokenSummaryRead",
    "UsageDayRead",
    "UsageStatsRead",
]
