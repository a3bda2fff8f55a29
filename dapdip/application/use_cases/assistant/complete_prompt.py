"""Metered text completion through the AI assistant."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from dapdip.application.use_cases.tokens import (
    estimate_token_count,
    get_operation_cost,
    get_token_summary,
    record_usage,
    release_tokens,
    require_tokens,
)
from dapdip.infrastructure.openai_client import OpenAIServiceError, TextGenerationClient

logger = logging.getLogger(__name__)

OPERATION_TYPE = "CHAT_MESSAGE"
ENDPOINT = "assistant.complete"


def _message_variation(prompt: str) -> str:
    if len(prompt) < 200:
        return "short"
    if len(prompt) < 1000:
        return "medium"
    return "long"


def estimate_prompt_cost(prompt: str) -> int:
    """Return the tokens reserved before calling the model for ``prompt``."""

    flat_cost = get_operation_cost(OPERATION_TYPE, _message_variation(prompt))
    return max(flat_cost, estimate_token_count(prompt))


def complete_prompt(
    session: Session,
    user_id: int,
    *,
    prompt: str,
    client: TextGenerationClient,
    feature_area: str = "assistant",
) -> dict[str, Any]:
    """Answer ``prompt`` if the user's budget allows it.

    The estimated cost is reserved up front and released again when the model
    call fails. Raises :class:`TokenLimitExceededError` when the reservation
    does not fit.
    """

    prompt = prompt.strip()
    if not prompt:
        raise ValueError("The prompt cannot be empty")

    cost = estimate_prompt_cost(prompt)
    require_tokens(session, user_id, cost)

    try:
        generated = client.generate(prompt)
    except OpenAIServiceError as exc:
        release_tokens(session, user_id, cost)
        record_usage(
            session,
            user_id,
            operation_type=OPERATION_TYPE,
            tokens_used=0,
            model=client.model,
            metadata={
                "endpoint": ENDPOINT,
                "feature_area": feature_area,
                "success": False,
                "error_code": type(exc).__name__,
            },
        )
        raise

    recorded = record_usage(
        session,
        user_id,
        operation_type=OPERATION_TYPE,
        tokens_used=cost,
        model=generated.model,
        reserved=cost,
        metadata={
            "endpoint": ENDPOINT,
            "feature_area": feature_area,
            "prompt_tokens": generated.prompt_tokens,
            "completion_tokens": generated.completion_tokens,
            "response_time": generated.response_time,
        },
    )
    if not recorded:
        logger.warning("Usage of %s tokens by user %s needs reconciliation", cost, user_id)

    return {
        "text": generated.text,
        "model": generated.model,
        "tokens_charged": cost,
        "tokens": get_token_summary(session, user_id),
    }


__all__ = ["complete_prompt", "estimate_prompt_cost"]
