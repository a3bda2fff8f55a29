"""Use case returning the user-visible token balance."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from .ledger import load_current_limit


def get_token_summary(session: Session, user_id: int) -> dict[str, Any]:
    token_limit = load_current_limit(session, user_id)
    return {
        "tier": token_limit.tier.value,
        "limit": token_limit.limit,
        "usage": token_limit.usage,
        "remaining": token_limit.remaining,
        "reset_at": token_limit.reset_at,
        "monthly_allocation": token_limit.monthly_allocation,
        "lifetime_usage": token_limit.lifetime_usage,
        "previous_month_carry": token_limit.previous_month_carry,
        "bonus_tokens": token_limit.bonus_tokens,
        "preferred_model": token_limit.preferred_model,
        "subscription_period": token_limit.subscription_period.value,
        "subscription_ends_at": token_limit.subscription_ends_at,
    }


__all__ = ["get_token_summary"]
