"""Token metering use cases."""

from .costs import (
    DEFAULT_OPERATION_COST,
    TOKEN_COSTS,
    estimate_token_count,
    get_operation_cost,
)
from .get_token_summary import get_token_summary
from .get_usage_stats import get_usage_stats
from .grant_bonus_tokens import grant_bonus_tokens
from .ledger import (
    check_availability,
    load_current_limit,
    record_usage,
    release_tokens,
    require_tokens,
    reserve_tokens,
)
from .upgrade_tier import upgrade_tier

__all__ = [
    "DEFAULT_OPERATION_COST",
    "TOKEN_COSTS",
    "check_availability",
    "estimate_token_count",
    "get_operation_cost",
    "get_token_summary",
    "get_usage_stats",
    "grant_bonus_tokens",
    "load_current_limit",
    "record_usage",
    "release_tokens",
    "require_tokens",
    "reserve_tokens",
    "upgrade_tier",
]
