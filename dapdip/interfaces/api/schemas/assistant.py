"""Pydantic models for the assistant interaction endpoints."""

from pydantic import BaseModel, Field

from .token import TokenSummaryRead


class AssistantPromptRequest(BaseModel):
    """Payload with the user's free-form prompt."""

    prompt: str = Field(..., min_length=1, max_length=8000)
    feature_area: str = Field(default="assistant", max_length=50)


class AssistantPromptResponse(BaseModel):
    text: str
    model: str
    tokens_charged: int
    tokens: TokenSummaryRead


__all__ = ["AssistantPromptRequest", "AssistantPromptResponse"]
