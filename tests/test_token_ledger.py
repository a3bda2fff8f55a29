"""Tests for token admission, accounting and lazy window resets."""

from __future__ import annotations

from datetime import timedelta

import pytest

from dapdip.application.use_cases.tokens import (
    check_availability,
    get_token_summary,
    get_usage_stats,
    grant_bonus_tokens,
    load_current_limit,
    record_usage,
    release_tokens,
    require_tokens,
    reserve_tokens,
    upgrade_tier,
)
from dapdip.domain.entities import NotificationType, TokenTier
from dapdip.domain.errors import TOKEN_LIMIT_EXCEEDED, TokenLimitExceededError
from dapdip.infrastructure.models import TokenLimitModel
from dapdip.infrastructure.repositories import NotificationRepository, TokenLimitRepository
from dapdip.utils import now_in_app_naive_datetime, now_in_app_timezone


def _expire_window(session, user_id: int) -> None:
    session.query(TokenLimitModel).filter(TokenLimitModel.user_id == user_id).update(
        {TokenLimitModel.reset_at: now_in_app_naive_datetime() - timedelta(minutes=5)},
        synchronize_session=False,
    )
    session.commit()


def _spend(session, user_id: int, tokens: int) -> None:
    assert check_availability(session, user_id, tokens).has_tokens
    assert record_usage(
        session, user_id, operation_type="CHAT_MESSAGE", tokens_used=tokens, model="gpt-4.1-mini"
    )


def test_first_check_creates_free_tier_defaults(session, make_user) -> None:
    user = make_user()

    availability = check_availability(session, user.id, 10)

    assert availability.has_tokens is True
    token_limit = availability.token_limit
    assert token_limit.tier is TokenTier.FREE
    assert token_limit.limit == 150
    assert token_limit.usage == 0
    assert token_limit.monthly_allocation == 5000
    expected_reset = now_in_app_timezone() + timedelta(hours=24)
    assert abs((token_limit.reset_at - expected_reset).total_seconds()) < 60


def test_skip_check_never_touches_the_ledger(session, make_user) -> None:
    user = make_user()

    availability = check_availability(session, user.id, 10_000, skip_check=True)

    assert availability.has_tokens is True
    assert availability.token_limit is None
    assert TokenLimitRepository(session).get_by_user(user.id) is None


def test_record_usage_without_budget_returns_false(session, make_user) -> None:
    user = make_user()

    assert record_usage(
        session, user.id, operation_type="CHAT_MESSAGE", tokens_used=5, model="gpt"
    ) is False


def test_usage_accumulates_and_is_audited(session, make_user) -> None:
    user = make_user()

    _spend(session, user.id, 30)
    _spend(session, user.id, 45)

    token_limit = load_current_limit(session, user.id)
    assert token_limit.usage == 75
    assert token_limit.lifetime_usage == 75
    records = TokenLimitRepository(session).list_records(token_limit.id)
    assert [record.tokens_used for record in records] == [30, 45]
    assert all(record.operation_type == "CHAT_MESSAGE" for record in records)


def test_record_usage_keeps_metadata_fields(session, make_user) -> None:
    user = make_user()
    check_availability(session, user.id, 1)

    record_usage(
        session,
        user.id,
        operation_type="CONTENT_GENERATION",
        tokens_used=20,
        model="gpt-4.1-mini",
        metadata={
            "endpoint": "posts.generate",
            "feature_area": "posts",
            "prompt_tokens": 12,
            "completion_tokens": 8,
            "response_time": 0.4,
            "draft_id": 9,
        },
    )

    token_limit = load_current_limit(session, user.id)
    (record,) = TokenLimitRepository(session).list_records(token_limit.id)
    assert record.endpoint == "posts.generate"
    assert record.feature_area == "posts"
    assert record.prompt_tokens == 12
    assert record.completion_tokens == 8
    assert record.metadata == {"draft_id": 9}


def test_cost_over_remaining_budget_is_rejected(session, make_user) -> None:
    user = make_user()
    _spend(session, user.id, 145)

    assert check_availability(session, user.id, 10).has_tokens is False
    assert check_availability(session, user.id, 5).has_tokens is True

    with pytest.raises(TokenLimitExceededError) as excinfo:
        require_tokens(session, user.id, 10)

    assert excinfo.value.code == TOKEN_LIMIT_EXCEEDED
    assert excinfo.value.remaining == 5
    assert excinfo.value.to_detail()["code"] == "TOKEN_LIMIT_EXCEEDED"
    assert load_current_limit(session, user.id).usage == 145


def test_elapsed_window_resets_before_evaluating(session, make_user) -> None:
    user = make_user()
    _spend(session, user.id, 140)
    _expire_window(session, user.id)

    availability = check_availability(session, user.id, 100)

    assert availability.has_tokens is True
    token_limit = availability.token_limit
    assert token_limit.usage == 0
    assert token_limit.lifetime_usage == 140
    assert token_limit.previous_month_carry == 0
    assert token_limit.reset_at > now_in_app_timezone() + timedelta(hours=23)
    records = TokenLimitRepository(session).list_records(token_limit.id)
    assert records[-1].operation_type == "TOKEN_RESET"
    assert records[-1].tokens_used == -140


def test_paid_tiers_carry_a_tenth_of_the_unused_budget(session, make_user) -> None:
    user = make_user()
    upgrade_tier(session, user.id, tier=TokenTier.BASIC)
    _spend(session, user.id, 600)
    _expire_window(session, user.id)

    token_limit = load_current_limit(session, user.id)

    assert token_limit.usage == 0
    assert token_limit.previous_month_carry == 40


def test_reset_happens_once_for_stale_readers(session, make_user) -> None:
    user = make_user()
    _spend(session, user.id, 50)
    _expire_window(session, user.id)
    stale = TokenLimitRepository(session).get_by_user(user.id)

    load_current_limit(session, user.id)
    _spend(session, user.id, 20)

    assert TokenLimitRepository(session).reset_window(
        stale, now=now_in_app_timezone(), carry_over=0
    ) is False
    assert load_current_limit(session, user.id).usage == 20


def test_check_then_record_can_overspend(session, make_user) -> None:
    user = make_user()
    _spend(session, user.id, 140)

    first = check_availability(session, user.id, 10)
    second = check_availability(session, user.id, 10)
    for availability in (first, second):
        assert availability.has_tokens
        record_usage(session, user.id, operation_type="CHAT_MESSAGE", tokens_used=10, model="gpt")

    assert load_current_limit(session, user.id).usage == 160


def test_reservations_never_overspend(session, make_user) -> None:
    user = make_user()
    _spend(session, user.id, 140)

    first = reserve_tokens(session, user.id, 10)
    second = reserve_tokens(session, user.id, 10)

    assert first.has_tokens is True
    assert second.has_tokens is False
    assert load_current_limit(session, user.id).usage == 150


def test_settling_a_reservation_counts_usage_once(session, make_user) -> None:
    user = make_user()
    require_tokens(session, user.id, 25)

    record_usage(
        session,
        user.id,
        operation_type="CHAT_MESSAGE",
        tokens_used=25,
        model="gpt",
        reserved=25,
    )

    token_limit = load_current_limit(session, user.id)
    assert token_limit.usage == 25
    assert token_limit.lifetime_usage == 25


def test_release_returns_reserved_tokens(session, make_user) -> None:
    user = make_user()
    require_tokens(session, user.id, 40)

    assert release_tokens(session, user.id, 40) is True
    assert release_tokens(session, user.id, 0) is False
    assert load_current_limit(session, user.id).usage == 0


def test_reserve_requires_positive_cost(session, make_user) -> None:
    user = make_user()

    with pytest.raises(ValueError):
        reserve_tokens(session, user.id, 0)


def test_upgrade_keeps_usage_unless_reset_is_immediate(session, make_user) -> None:
    user = make_user()
    _spend(session, user.id, 100)

    upgraded = upgrade_tier(session, user.id, tier=TokenTier.PRO)
    assert upgraded.tier is TokenTier.PRO
    assert upgraded.limit == 5000
    assert upgraded.monthly_allocation == 150000
    assert upgraded.usage == 100
    assert upgraded.subscription_ends_at is not None

    reset = upgrade_tier(session, user.id, tier=TokenTier.PRO, reset="immediate")
    assert reset.usage == 0


def test_upgrade_lets_a_rejected_request_through(session, make_user) -> None:
    user = make_user()
    _spend(session, user.id, 145)
    assert check_availability(session, user.id, 10).has_tokens is False

    upgrade_tier(session, user.id, tier=TokenTier.BASIC)
    _spend(session, user.id, 10)

    token_limit = load_current_limit(session, user.id)
    assert token_limit.tier is TokenTier.BASIC
    assert token_limit.usage == 155


def test_downgrade_to_free_clears_subscription(session, make_user) -> None:
    user = make_user()
    upgrade_tier(session, user.id, tier=TokenTier.BASIC)

    downgraded = upgrade_tier(session, user.id, tier=TokenTier.FREE)

    assert downgraded.limit == 150
    assert downgraded.subscription_started_at is None
    assert downgraded.subscription_ends_at is None


def test_bonus_raises_limit_and_notifies(session, make_user, publisher) -> None:
    admin = make_user(is_admin=True)
    user = make_user()

    token_limit = grant_bonus_tokens(
        session, user.id, 5, reason="Beta feedback", granted_by=admin.id, publisher=publisher
    )

    assert token_limit.limit == 155
    assert token_limit.bonus_tokens == 5
    (notification,) = NotificationRepository(session).list_for_recipient(user.id)
    assert notification.type is NotificationType.TOKEN_BONUS
    assert notification.content == "You received 5 bonus tokens. Reason: Beta feedback"
    assert len(publisher.for_user(user.id)) == 1

    summary = get_token_summary(session, user.id)
    assert summary["remaining"] == 155


def test_bonus_must_be_positive(session, make_user, publisher) -> None:
    user = make_user()

    with pytest.raises(ValueError):
        grant_bonus_tokens(session, user.id, 0, publisher=publisher)


def test_usage_stats_count_failed_calls(session, make_user, publisher) -> None:
    user = make_user()
    _spend(session, user.id, 10)
    record_usage(
        session,
        user.id,
        operation_type="CHAT_MESSAGE",
        tokens_used=0,
        model="gpt-4.1-mini",
        metadata={"success": False, "error_code": "APITimeoutError"},
    )
    grant_bonus_tokens(session, user.id, 5, publisher=publisher)

    stats = get_usage_stats(session, user.id, timeframe="day")

    assert stats["total_calls"] == 2
    assert stats["total_tokens"] == 10
    assert stats["success_rate"] == 0.5
    assert stats["by_operation_type"] == {"CHAT_MESSAGE": 10}
    (day,) = stats["by_day"]
    assert day["calls"] == 2
    assert day["success_rate"] == 0.5


def test_usage_stats_reject_unknown_timeframe(session, make_user) -> None:
    user = make_user()

    with pytest.raises(ValueError):
        get_usage_stats(session, user.id, timeframe="decade")
