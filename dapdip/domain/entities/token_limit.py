"""Domain entities for AI token metering."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class TokenTier(str, Enum):
    FREE = "FREE"
    BASIC = "BASIC"
    PRO = "PRO"
    ENTERPRISE = "ENTERPRISE"


class SubscriptionPeriod(str, Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    ANNUAL = "ANNUAL"


DAILY_LIMITS: dict[TokenTier, int] = {
    TokenTier.FREE: 150,
    TokenTier.BASIC: 1000,
    TokenTier.PRO: 5000,
    TokenTier.ENTERPRISE: 10000,
}

MONTHLY_ALLOCATIONS: dict[TokenTier, int] = {
    TokenTier.FREE: 5000,
    TokenTier.BASIC: 30000,
    TokenTier.PRO: 150000,
    TokenTier.ENTERPRISE: 500000,
}

# Share of the unused daily budget carried over when a paid tier resets.
CARRY_OVER_RATIO = 0.1

DEFAULT_PREFERRED_MODEL = "AUTO"
RESET_INTERVAL_HOURS = 24


@dataclass
class TokenLimit:
    """Token budget and lifetime counters of a single user."""

    id: int | None
    user_id: int
    tier: TokenTier
    limit: int
    usage: int
    reset_at: datetime
    monthly_allocation: int
    lifetime_usage: int = 0
    previous_month_carry: int = 0
    bonus_tokens: int = 0
    subscription_period: SubscriptionPeriod = SubscriptionPeriod.MONTHLY
    subscription_started_at: datetime | None = None
    subscription_ends_at: datetime | None = None
    preferred_model: str = DEFAULT_PREFERRED_MODEL
    last_activity: datetime | None = None

    @property
    def remaining(self) -> int:
        return max(self.limit - self.usage, 0)

    def carry_over(self) -> int:
        """Return the tokens carried into the next window on reset."""

        if self.tier is TokenTier.FREE:
            return 0
        return int(max(self.limit - self.usage, 0) * CARRY_OVER_RATIO)


@dataclass
class TokenUsageRecord:
    """Append-only audit entry of one metered operation."""

    id: int | None
    token_limit_id: int
    operation_type: str
    tokens_used: int
    model: str
    endpoint: str | None = None
    feature_area: str | None = None
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    success: bool = True
    error_code: str | None = None
    response_time: float | None = None
    cost_multiplier: float = 1.0
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None


@dataclass
class TokenAvailability:
    """Outcome of an admission check against a user's budget."""

    has_tokens: bool
    token_limit: TokenLimit | None


__all__ = [
    "CARRY_OVER_RATIO",
    "DAILY_LIMITS",
    "DEFAULT_PREFERRED_MODEL",
    "MONTHLY_ALLOCATIONS",
    "RESET_INTERVAL_HOURS",
    "SubscriptionPeriod",
    "TokenAvailability",
    "TokenLimit",
    "TokenTier",
    "TokenUsageRecord",
]
