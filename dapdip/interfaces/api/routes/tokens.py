"""Routes exposing the AI token ledger."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from dapdip.application.use_cases.tokens import (
    get_token_summary as get_token_summary_uc,
    get_usage_stats as get_usage_stats_uc,
    grant_bonus_tokens as grant_bonus_tokens_uc,
    upgrade_tier as upgrade_tier_uc,
)
from dapdip.application.use_cases.users import get_user as get_user_uc
from dapdip.domain.entities import User
from dapdip.infrastructure.database import get_db
from dapdip.infrastructure.notifications import RelayPublisher
from dapdip.interfaces.api.dependencies import (
    get_current_active_user,
    get_relay_publisher,
    require_admin,
)
from dapdip.interfaces.api.schemas import (
    BonusTokensRequest,
    TierUpgradeRequest,
    TokenSummaryRead,
    UsageStatsRead,
)

router = APIRouter(prefix="/tokens", tags=["tokens"])
logger = logging.getLogger(__name__)


@router.get("/", response_model=TokenSummaryRead)
def read_token_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Return the caller's budget, starting a new window when the old one elapsed."""

    return TokenSummaryRead.model_validate(get_token_summary_uc(db, current_user.id))


@router.post("/upgrade", response_model=TokenSummaryRead)
def upgrade_tier(
    payload: TierUpgradeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    upgrade_tier_uc(
        db,
        current_user.id,
        tier=payload.tier,
        bonus_tokens=payload.bonus_tokens,
        reset=payload.reset,
        subscription_period=payload.subscription_period,
    )
    logger.info("User %s moved to tier %s", current_user.id, payload.tier.value)
    return TokenSummaryRead.model_validate(get_token_summary_uc(db, current_user.id))


@router.get("/usage", response_model=UsageStatsRead)
def read_usage_stats(
    timeframe: str = Query("month", pattern="^(day|week|month|year)$"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return UsageStatsRead.model_validate(
        get_usage_stats_uc(db, current_user.id, timeframe=timeframe)
    )


@router.post("/bonus", response_model=TokenSummaryRead)
def grant_bonus_tokens(
    payload: BonusTokensRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    publisher: RelayPublisher = Depends(get_relay_publisher),
):
    """Credit bonus tokens to ``user_id`` and notify them."""

    try:
        get_user_uc(db, payload.user_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    try:
        grant_bonus_tokens_uc(
            db,
            payload.user_id,
            payload.amount,
            reason=payload.reason,
            granted_by=current_user.id,
            publisher=publisher,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return TokenSummaryRead.model_validate(get_token_summary_uc(db, payload.user_id))
