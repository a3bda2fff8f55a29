"""Routes for the metered AI assistant."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from dapdip.application.use_cases.assistant import complete_prompt as complete_prompt_uc
from dapdip.domain.entities import User
from dapdip.domain.errors import TokenLimitExceededError
from dapdip.infrastructure.database import get_db
from dapdip.infrastructure.openai_client import OpenAIServiceError, TextGenerationClient
from dapdip.interfaces.api.dependencies import (
    get_current_active_user,
    get_text_generation_client,
    token_limit_exception,
)
from dapdip.interfaces.api.schemas import AssistantPromptRequest, AssistantPromptResponse

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/complete", response_model=AssistantPromptResponse)
def complete_prompt(
    payload: AssistantPromptRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    client: TextGenerationClient = Depends(get_text_generation_client),
) -> AssistantPromptResponse:
    """Answer ``prompt`` and charge its cost to the caller's token budget."""

    try:
        result = complete_prompt_uc(
            db,
            current_user.id,
            prompt=payload.prompt,
            client=client,
            feature_area=payload.feature_area,
        )
    except TokenLimitExceededError as exc:
        raise token_limit_exception(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except OpenAIServiceError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc
    return AssistantPromptResponse.model_validate(result)
