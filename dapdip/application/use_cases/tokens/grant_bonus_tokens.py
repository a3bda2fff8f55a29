"""Use case for crediting bonus tokens to a user."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from dapdip.application.use_cases.notifications import notify
from dapdip.domain.entities import (
    NotificationPriority,
    NotificationType,
    TokenLimit,
    TokenUsageRecord,
)
from dapdip.infrastructure.notifications import RelayPublisher
from dapdip.infrastructure.repositories import TokenLimitRepository

from .ledger import SYSTEM_MODEL, load_current_limit

logger = logging.getLogger(__name__)


def grant_bonus_tokens(
    session: Session,
    user_id: int,
    amount: int,
    *,
    reason: str | None = None,
    granted_by: int | None = None,
    publisher: RelayPublisher | None = None,
) -> TokenLimit:
    """Raise the user's limit by ``amount`` and tell them about it."""

    if amount <= 0:
        raise ValueError("Bonus amount must be a positive integer")

    current = load_current_limit(session, user_id)
    repository = TokenLimitRepository(session)
    repository.add_bonus(user_id, amount)
    repository.append_record(
        TokenUsageRecord(
            id=None,
            token_limit_id=current.id,
            operation_type="BONUS_TOKENS",
            tokens_used=-amount,
            model=SYSTEM_MODEL,
            feature_area="rewards",
            metadata={
                "reason": reason,
                "granted_by": granted_by,
                "previous_balance": current.bonus_tokens,
                "new_balance": current.bonus_tokens + amount,
            },
        )
    )
    logger.info("Granted %s bonus tokens to user %s", amount, user_id)

    content = f"You received {amount} bonus tokens."
    if reason:
        content = f"{content} Reason: {reason}"
    notify(
        session,
        recipient_id=user_id,
        notification_type=NotificationType.TOKEN_BONUS,
        content=content,
        priority=NotificationPriority.NORMAL,
        url="/ai-settings/tokens",
        metadata={"amount": amount, "reason": reason},
        publisher=publisher,
    )

    refreshed = repository.get_by_user(user_id)
    if refreshed is None:  # pragma: no cover - rows are never deleted
        raise RuntimeError(f"Token limit for user {user_id} disappeared")
    return refreshed


__all__ = ["grant_bonus_tokens"]
