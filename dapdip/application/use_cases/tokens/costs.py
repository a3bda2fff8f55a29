"""Token prices of metered operations and prompt size estimation."""

from __future__ import annotations

import math
import re
from typing import Final, Mapping

DEFAULT_OPERATION_COST: Final[int] = 50

TOKEN_COSTS: Final[Mapping[str, int | Mapping[str, int]]] = {
    "CONTENT_ANALYSIS": {
        "standard": 50,
        "detailed": 100,
        "sentiment": 30,
        "moderation": 40,
    },
    "HEALTH_RECOMMENDATIONS": {"basic": 75, "standard": 100, "detailed": 200},
    "CHAT_MESSAGE": {"short": 20, "medium": 30, "long": 50},
    "IMAGE_ANALYSIS": {"description": 60, "detailed": 120, "moderation": 80},
    "MEAL_PLAN_GENERATION": 150,
    "WORKOUT_PLAN_GENERATION": 150,
    "TRANSLATION": {"detection": 20, "standard": 40, "precise": 60},
    "LANGUAGE_ANALYSIS": {"standard": 50, "detailed": 80},
    "MULTILINGUAL_GENERATION": {"standard": 60, "creative": 80},
    "SEO_OPTIMIZATION": 80,
    "FEED_PERSONALIZATION": 40,
}

_NON_ASCII = re.compile(r"[^\x00-\x7f]")
_CODE_INDICATORS: Final[tuple[str, ...]] = (
    "{",
    "}",
    "()",
    ";",
    "===",
    "=>",
    "function",
    "class",
    "import ",
    "export ",
)


def get_operation_cost(operation: str, variation: str = "standard") -> int:
    """Return the flat token price of ``operation``.

    Unknown operations and variations fall back to the ``standard`` price, then
    to :data:`DEFAULT_OPERATION_COST`.
    """

    costs = TOKEN_COSTS.get(operation)
    if costs is None:
        return DEFAULT_OPERATION_COST
    if isinstance(costs, Mapping):
        return costs.get(variation) or costs.get("standard") or DEFAULT_OPERATION_COST
    return costs


def estimate_token_count(text: str | None) -> int:
    """Approximate how many model tokens ``text`` will consume."""

    if not text:
        return 0

    non_ascii = len(_NON_ASCII.findall(text))
    if non_ascii / len(text) > 0.5:
        return math.ceil(len(text) / 2.5)

    if any(indicator in text for indicator in _CODE_INDICATORS):
        return math.ceil(len(text) / 5)

    return math.ceil(len(text) / 4)


__all__ = [
    "DEFAULT_OPERATION_COST",
    "TOKEN_COSTS",
    "estimate_token_count",
    "get_operation_cost",
]
