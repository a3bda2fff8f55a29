"""Thin wrapper around the OpenAI Responses API for metered text generation."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

from openai import OpenAI, OpenAIError

from dapdip.config import get_settings

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = (
    "You are the DapDip assistant. Answer briefly and helpfully. "
    "Keep a friendly tone suitable for a social network."
)


class OpenAIConfigurationError(RuntimeError):
    """Raised when the OpenAI client lacks its basic configuration."""


class OpenAIServiceError(RuntimeError):
    """Raised when the OpenAI API does not answer as expected."""


@dataclass
class GeneratedText:
    """Text produced by the model together with its token accounting."""

    text: str
    model: str
    prompt_tokens: int
    completion_tokens: int
    response_time: float

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


class TextGenerationClient:
    """Generate free-form text through the OpenAI Responses API."""

    def __init__(self) -> None:
        settings = get_settings()

        api_key = (settings.openai_api_key or "").strip()
        if not api_key:
            raise OpenAIConfigurationError(
                "OPENAI_API_KEY is not defined in the environment.",
            )

        base_url = (settings.openai_base_url or "").strip()
        model = (settings.openai_model or "gpt-4.1-mini").strip() or "gpt-4.1-mini"
        max_output_tokens = settings.openai_max_output_tokens
        if max_output_tokens is not None and max_output_tokens <= 0:
            max_output_tokens = None

        client_kwargs: dict[str, Any] = {"api_key": api_key}
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = OpenAI(**client_kwargs)
        self._model = model
        self._temperature = float(settings.openai_temperature)
        self._max_output_tokens = max_output_tokens

    @property
    def model(self) -> str:
        return self._model

    def generate(self, prompt: str, *, instructions: str | None = None) -> GeneratedText:
        """Send ``prompt`` to the model and return its answer."""

        request_kwargs: dict[str, Any] = {
            "model": self._model,
            "input": [
                {"role": "system", "content": instructions or _SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": self._temperature,
        }
        if self._max_output_tokens is not None:
            request_kwargs["max_output_tokens"] = self._max_output_tokens

        started = time.perf_counter()
        try:
            resp = self._client.responses.create(**request_kwargs)
        except OpenAIError as exc:
            raise OpenAIServiceError("The request to OpenAI failed.") from exc
        elapsed = time.perf_counter() - started

        text = getattr(resp, "output_text", None)
        if not text:
            try:
                text = resp.output[0].content[0].text
            except (AttributeError, IndexError, TypeError) as exc:
                raise OpenAIServiceError("The OpenAI response has no usable text.") from exc

        usage = getattr(resp, "usage", None)
        prompt_tokens = int(getattr(usage, "input_tokens", 0) or 0)
        completion_tokens = int(getattr(usage, "output_tokens", 0) or 0)
        logger.debug(
            "OpenAI answered in %.2fs using %s+%s tokens",
            elapsed,
            prompt_tokens,
            completion_tokens,
        )
        return GeneratedText(
            text=text.strip(),
            model=getattr(resp, "model", None) or self._model,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            response_time=elapsed,
        )


__all__ = [
    "GeneratedText",
    "OpenAIConfigurationError",
    "OpenAIServiceError",
    "TextGenerationClient",
]
