"""Use case for moving a user to another token tier."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from typing import Literal

from sqlalchemy.orm import Session

from dapdip.domain.entities import (
    DAILY_LIMITS,
    MONTHLY_ALLOCATIONS,
    SubscriptionPeriod,
    TokenLimit,
    TokenTier,
)
from dapdip.domain.entities.token_limit import RESET_INTERVAL_HOURS
from dapdip.infrastructure.repositories import TokenLimitRepository
from dapdip.utils import now_in_app_timezone

from .ledger import load_current_limit

logger = logging.getLogger(__name__)

ResetType = Literal["none", "immediate"]

_PERIOD_LENGTHS: dict[SubscriptionPeriod, timedelta] = {
    SubscriptionPeriod.MONTHLY: timedelta(days=30),
    SubscriptionPeriod.QUARTERLY: timedelta(days=90),
    SubscriptionPeriod.ANNUAL: timedelta(days=365),
}


def upgrade_tier(
    session: Session,
    user_id: int,
    *,
    tier: TokenTier,
    bonus_tokens: int = 0,
    reset: ResetType = "none",
    subscription_period: SubscriptionPeriod | None = None,
) -> TokenLimit:
    """Apply the limits of ``tier``; usage is kept unless ``reset`` is immediate."""

    if bonus_tokens < 0:
        raise ValueError("Bonus tokens cannot be negative")
    if reset not in ("none", "immediate"):
        raise ValueError(f"Unsupported reset type: {reset}")

    current = load_current_limit(session, user_id)
    now = now_in_app_timezone()
    period = subscription_period or current.subscription_period

    updated = replace(
        current,
        tier=tier,
        limit=DAILY_LIMITS[tier] + bonus_tokens,
        monthly_allocation=MONTHLY_ALLOCATIONS[tier],
        bonus_tokens=current.bonus_tokens + bonus_tokens,
        subscription_period=period,
        last_activity=now,
    )
    if tier is TokenTier.FREE:
        updated = replace(updated, subscription_started_at=None, subscription_ends_at=None)
    elif tier is not current.tier or subscription_period is not None:
        updated = replace(
            updated,
            subscription_started_at=now,
            subscription_ends_at=now + _PERIOD_LENGTHS[period],
        )
    if reset == "immediate":
        updated = replace(
            updated,
            usage=0,
            reset_at=now + timedelta(hours=RESET_INTERVAL_HOURS),
        )

    saved = TokenLimitRepository(session).update(updated)
    logger.info(
        "User %s moved from %s to %s (limit %s)",
        user_id,
        current.tier.value,
        saved.tier.value,
        saved.limit,
    )
    return saved


__all__ = ["ResetType", "upgrade_tier"]
