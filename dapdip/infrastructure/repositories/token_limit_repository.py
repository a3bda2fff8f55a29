"""Persistence helpers for token budgets.

Every balance change is issued as a single conditional ``UPDATE`` so the
database arbitrates concurrent requests for the same user.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from sqlalchemy import case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dapdip.domain.entities import (
    DAILY_LIMITS,
    MONTHLY_ALLOCATIONS,
    SubscriptionPeriod,
    TokenLimit,
    TokenTier,
    TokenUsageRecord,
)
from dapdip.domain.entities.token_limit import (
    DEFAULT_PREFERRED_MODEL,
    RESET_INTERVAL_HOURS,
)
from dapdip.infrastructure.models import TokenLimitModel, TokenUsageRecordModel
from dapdip.utils import ensure_app_naive_datetime, ensure_app_timezone


class TokenLimitRepository:
    """Provide atomic balance operations over :class:`TokenLimit` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_user(self, user_id: int) -> TokenLimit | None:
        model = self._get_model(user_id)
        return self._to_entity(model) if model else None

    def create_default(self, user_id: int, *, now: datetime) -> TokenLimit:
        """Insert the FREE tier budget for ``user_id``."""

        naive_now = ensure_app_naive_datetime(now)
        model = TokenLimitModel(
            user_id=user_id,
            tier=TokenTier.FREE.value,
            limit=DAILY_LIMITS[TokenTier.FREE],
            usage=0,
            reset_at=naive_now + timedelta(hours=RESET_INTERVAL_HOURS),
            monthly_allocation=MONTHLY_ALLOCATIONS[TokenTier.FREE],
            lifetime_usage=0,
            previous_month_carry=0,
            bonus_tokens=0,
            subscription_period=SubscriptionPeriod.MONTHLY.value,
            preferred_model=DEFAULT_PREFERRED_MODEL,
            last_activity=naive_now,
        )
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            existing = self._get_model(user_id)
            if existing is None:
                raise
            return self._to_entity(existing)
        self.session.refresh(model)
        return self._to_entity(model)

    def reset_window(
        self,
        token_limit: TokenLimit,
        *,
        now: datetime,
        carry_over: int,
    ) -> bool:
        """Start a new window if ``reset_at`` still holds the observed value.

        Returns ``True`` when this call performed the reset.
        """

        observed = ensure_app_naive_datetime(token_limit.reset_at)
        naive_now = ensure_app_naive_datetime(now)
        updated = (
            self.session.query(TokenLimitModel)
            .filter(
                TokenLimitModel.user_id == token_limit.user_id,
                TokenLimitModel.reset_at == observed,
            )
            .update(
                {
                    TokenLimitModel.usage: 0,
                    TokenLimitModel.previous_month_carry: carry_over,
                    TokenLimitModel.reset_at: naive_now
                    + timedelta(hours=RESET_INTERVAL_HOURS),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return bool(updated)

    def try_consume(self, user_id: int, amount: int, *, now: datetime) -> bool:
        """Add ``amount`` to usage only if it fits within the current window."""

        naive_now = ensure_app_naive_datetime(now)
        updated = (
            self.session.query(TokenLimitModel)
            .filter(
                TokenLimitModel.user_id == user_id,
                TokenLimitModel.usage + amount <= TokenLimitModel.limit,
                TokenLimitModel.reset_at >= naive_now,
            )
            .update(
                {
                    TokenLimitModel.usage: TokenLimitModel.usage + amount,
                    TokenLimitModel.last_activity: naive_now,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return bool(updated)

    def release(self, user_id: int, amount: int) -> bool:
        """Give ``amount`` back to the window without going below zero."""

        updated = (
            self.session.query(TokenLimitModel)
            .filter(TokenLimitModel.user_id == user_id)
            .update(
                {
                    TokenLimitModel.usage: case(
                        (
                            TokenLimitModel.usage >= amount,
                            TokenLimitModel.usage - amount,
                        ),
                        else_=0,
                    )
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return bool(updated)

    def add_usage(
        self,
        user_id: int,
        *,
        usage_delta: int,
        lifetime_delta: int,
        now: datetime,
    ) -> bool:
        """Increment the counters unconditionally."""

        updated = (
            self.session.query(TokenLimitModel)
            .filter(TokenLimitModel.user_id == user_id)
            .update(
                {
                    TokenLimitModel.usage: TokenLimitModel.usage + usage_delta,
                    TokenLimitModel.lifetime_usage: TokenLimitModel.lifetime_usage
                    + lifetime_delta,
                    TokenLimitModel.last_activity: ensure_app_naive_datetime(now),
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return bool(updated)

    def add_bonus(self, user_id: int, amount: int) -> bool:
        updated = (
            self.session.query(TokenLimitModel)
            .filter(TokenLimitModel.user_id == user_id)
            .update(
                {
                    TokenLimitModel.bonus_tokens: TokenLimitModel.bonus_tokens
                    + amount,
                    TokenLimitModel.limit: TokenLimitModel.limit + amount,
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return bool(updated)

    def update(self, token_limit: TokenLimit) -> TokenLimit:
        model = self._get_model(token_limit.user_id)
        if model is None:
            msg = f"Token limit for user {token_limit.user_id} not found"
            raise ValueError(msg)
        model.tier = token_limit.tier.value
        model.limit = token_limit.limit
        model.usage = token_limit.usage
        model.reset_at = ensure_app_naive_datetime(token_limit.reset_at)
        model.monthly_allocation = token_limit.monthly_allocation
        model.bonus_tokens = token_limit.bonus_tokens
        model.subscription_period = token_limit.subscription_period.value
        model.subscription_started_at = ensure_app_naive_datetime(
            token_limit.subscription_started_at
        )
        model.subscription_ends_at = ensure_app_naive_datetime(
            token_limit.subscription_ends_at
        )
        model.preferred_model = token_limit.preferred_model
        model.last_activity = ensure_app_naive_datetime(token_limit.last_activity)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def append_record(self, record: TokenUsageRecord) -> TokenUsageRecord:
        model = TokenUsageRecordModel(
            token_limit_id=record.token_limit_id,
            operation_type=record.operation_type,
            tokens_used=record.tokens_used,
            model=record.model,
            endpoint=record.endpoint,
            feature_area=record.feature_area,
            prompt_tokens=record.prompt_tokens,
            completion_tokens=record.completion_tokens,
            success=record.success,
            error_code=record.error_code,
            response_time=record.response_time,
            cost_multiplier=record.cost_multiplier,
            extra_data=dict(record.metadata or {}),
        )
        if record.created_at is not None:
            model.created_at = ensure_app_naive_datetime(record.created_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._record_to_entity(model)

    def list_records(
        self,
        token_limit_id: int,
        *,
        since: datetime | None = None,
    ) -> Sequence[TokenUsageRecord]:
        query = self.session.query(TokenUsageRecordModel).filter(
            TokenUsageRecordModel.token_limit_id == token_limit_id
        )
        if since is not None:
            query = query.filter(
                TokenUsageRecordModel.created_at >= ensure_app_naive_datetime(since)
            )
        query = query.order_by(
            TokenUsageRecordModel.created_at.asc(), TokenUsageRecordModel.id.asc()
        )
        return [self._record_to_entity(model) for model in query.all()]

    def _get_model(self, user_id: int) -> TokenLimitModel | None:
        return (
            self.session.query(TokenLimitModel)
            .filter(TokenLimitModel.user_id == user_id)
            .first()
        )

    @staticmethod
    def _to_entity(model: TokenLimitModel) -> TokenLimit:
        return TokenLimit(
            id=model.id,
            user_id=model.user_id,
            tier=TokenTier(model.tier),
            limit=model.limit,
            usage=model.usage,
            reset_at=ensure_app_timezone(model.reset_at),
            monthly_allocation=model.monthly_allocation,
            lifetime_usage=model.lifetime_usage,
            previous_month_carry=model.previous_month_carry,
            bonus_tokens=model.bonus_tokens,
            subscription_period=SubscriptionPeriod(model.subscription_period),
            subscription_started_at=ensure_app_timezone(model.subscription_started_at),
            subscription_ends_at=ensure_app_timezone(model.subscription_ends_at),
            preferred_model=model.preferred_model,
            last_activity=ensure_app_timezone(model.last_activity),
        )

    @staticmethod
    def _record_to_entity(model: TokenUsageRecordModel) -> TokenUsageRecord:
        return TokenUsageRecord(
            id=model.id,
            token_limit_id=model.token_limit_id,
            operation_type=model.operation_type,
            tokens_used=model.tokens_used,
            model=model.model,
            endpoint=model.endpoint,
            feature_area=model.feature_area,
            prompt_tokens=model.prompt_tokens,
            completion_tokens=model.completion_tokens,
            success=model.success,
            error_code=model.error_code,
            response_time=model.response_time,
            cost_multiplier=model.cost_multiplier,
            metadata=dict(model.extra_data or {}),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["TokenLimitRepository"]
