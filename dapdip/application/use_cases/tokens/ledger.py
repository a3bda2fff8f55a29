"""Admission and accounting of AI token spend.

``check_availability`` followed by ``record_usage`` is a read-then-write pair:
two requests evaluated before either records can jointly exceed the limit.
Callers that must never overspend use ``reserve_tokens``, which admits and
increments in a single conditional update, and settle with ``record_usage``
passing the reserved amount.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dapdip.domain.entities import TokenAvailability, TokenLimit, TokenUsageRecord
from dapdip.domain.errors import TokenLimitExceededError
from dapdip.infrastructure.repositories import TokenLimitRepository
from dapdip.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

SYSTEM_MODEL = "system"


def load_current_limit(session: Session, user_id: int) -> TokenLimit:
    """Return the user's budget, creating it or starting a new window as needed."""

    repository = TokenLimitRepository(session)
    now = now_in_app_timezone()
    token_limit = repository.get_by_user(user_id)
    if token_limit is None:
        logger.info("Creating FREE token limit for user %s", user_id)
        return repository.create_default(user_id, now=now)

    if token_limit.reset_at >= now:
        return token_limit

    carry_over = token_limit.carry_over()
    if repository.reset_window(token_limit, now=now, carry_over=carry_over):
        logger.info(
            "Token window reset for user %s (previous usage %s, carry over %s)",
            user_id,
            token_limit.usage,
            carry_over,
        )
        _append_record_safely(
            repository,
            TokenUsageRecord(
                id=None,
                token_limit_id=token_limit.id,
                operation_type="TOKEN_RESET",
                tokens_used=-token_limit.usage,
                model=SYSTEM_MODEL,
                endpoint="tokens.reset",
                feature_area="system",
                metadata={
                    "previous_usage": token_limit.usage,
                    "carry_over": carry_over,
                    "tier": token_limit.tier.value,
                },
            ),
        )

    refreshed = repository.get_by_user(user_id)
    if refreshed is None:  # pragma: no cover - rows are never deleted
        raise RuntimeError(f"Token limit for user {user_id} disappeared")
    return refreshed


def check_availability(
    session: Session,
    user_id: int,
    operation_cost: int,
    *,
    skip_check: bool = False,
) -> TokenAvailability:
    """Tell whether ``operation_cost`` tokens fit in the current window."""

    if skip_check:
        return TokenAvailability(has_tokens=True, token_limit=None)

    token_limit = load_current_limit(session, user_id)
    has_tokens = token_limit.usage + operation_cost <= token_limit.limit
    if not has_tokens:
        logger.info(
            "User %s lacks tokens: usage %s + cost %s > limit %s",
            user_id,
            token_limit.usage,
            operation_cost,
            token_limit.limit,
        )
    return TokenAvailability(has_tokens=has_tokens, token_limit=token_limit)


def reserve_tokens(session: Session, user_id: int, cost: int) -> TokenAvailability:
    """Atomically admit ``cost`` tokens and add them to the window usage."""

    if cost <= 0:
        raise ValueError("The reserved amount must be a positive integer")

    load_current_limit(session, user_id)
    repository = TokenLimitRepository(session)
    admitted = repository.try_consume(user_id, cost, now=now_in_app_timezone())
    token_limit = repository.get_by_user(user_id)
    if not admitted:
        logger.info("Reservation of %s tokens rejected for user %s", cost, user_id)
    return TokenAvailability(has_tokens=admitted, token_limit=token_limit)


def require_tokens(session: Session, user_id: int, cost: int) -> TokenLimit:
    """Reserve ``cost`` tokens or raise :class:`TokenLimitExceededError`."""

    availability = reserve_tokens(session, user_id, cost)
    token_limit = availability.token_limit
    if not availability.has_tokens:
        raise TokenLimitExceededError(
            required=cost,
            remaining=token_limit.remaining if token_limit else 0,
            tier=token_limit.tier.value if token_limit else None,
        )
    return token_limit


def release_tokens(session: Session, user_id: int, reserved: int) -> bool:
    """Return a reservation whose operation did not happen."""

    if reserved <= 0:
        return False
    released = TokenLimitRepository(session).release(user_id, reserved)
    if released:
        logger.info("Released %s reserved tokens for user %s", reserved, user_id)
    return released


def record_usage(
    session: Session,
    user_id: int,
    *,
    operation_type: str,
    tokens_used: int,
    model: str,
    metadata: dict[str, Any] | None = None,
    reserved: int = 0,
) -> bool:
    """Account for ``tokens_used`` and append the audit record.

    ``reserved`` tokens were already added to the window by ``reserve_tokens``
    and only count towards the lifetime total here. A failed audit append is
    logged and reported as ``False`` without undoing the increment.
    """

    repository = TokenLimitRepository(session)
    token_limit = repository.get_by_user(user_id)
    if token_limit is None:
        logger.warning("No token limit exists for user %s; usage not recorded", user_id)
        return False

    now = now_in_app_timezone()
    if not reserved and token_limit.reset_at < now:
        token_limit = load_current_limit(session, user_id)

    details = dict(metadata or {})
    repository.add_usage(
        user_id,
        usage_delta=tokens_used - reserved,
        lifetime_delta=tokens_used,
        now=now,
    )

    record = TokenUsageRecord(
        id=None,
        token_limit_id=token_limit.id,
        operation_type=operation_type,
        tokens_used=tokens_used,
        model=model,
        endpoint=details.pop("endpoint", None),
        feature_area=details.pop("feature_area", None),
        prompt_tokens=details.pop("prompt_tokens", None),
        completion_tokens=details.pop("completion_tokens", None),
        success=bool(details.pop("success", True)),
        error_code=details.pop("error_code", None),
        response_time=details.pop("response_time", None),
        cost_multiplier=float(details.pop("cost_multiplier", 1.0) or 1.0),
        metadata=details,
    )
    return _append_record_safely(repository, record)


def _append_record_safely(
    repository: TokenLimitRepository, record: TokenUsageRecord
) -> bool:
    try:
        repository.append_record(record)
    except SQLAlchemyError:
        repository.session.rollback()
        logger.exception(
            "Failed to append %s usage record for token limit %s",
            record.operation_type,
            record.token_limit_id,
        )
        return False
    return True


__all__ = [
    "check_availability",
    "load_current_limit",
    "record_usage",
    "release_tokens",
    "require_tokens",
    "reserve_tokens",
]
