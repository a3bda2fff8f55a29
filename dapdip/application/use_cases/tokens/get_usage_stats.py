"""Use case aggregating a user's token history."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Literal

from sqlalchemy.orm import Session

from dapdip.infrastructure.repositories import TokenLimitRepository
from dapdip.utils import now_in_app_timezone

from .ledger import load_current_limit

Timeframe = Literal["day", "week", "month", "year"]

_WINDOWS: dict[str, timedelta] = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}

_BOOKKEEPING_OPERATIONS = frozenset({"TOKEN_RESET", "BONUS_TOKENS"})


def get_usage_stats(
    session: Session,
    user_id: int,
    *,
    timeframe: Timeframe = "month",
    now: datetime | None = None,
) -> dict[str, Any]:
    """Summarise consumption over ``timeframe``.

    Every call is counted, including failed calls that consumed nothing.
    Resets and bonus credits are bookkeeping entries and are left out.
    """

    window = _WINDOWS.get(timeframe)
    if window is None:
        raise ValueError(f"Unsupported timeframe: {timeframe}")

    token_limit = load_current_limit(session, user_id)
    current_time = now or now_in_app_timezone()
    records = [
        record
        for record in TokenLimitRepository(session).list_records(
            token_limit.id, since=current_time - window
        )
        if record.operation_type not in _BOOKKEEPING_OPERATIONS
        and record.tokens_used >= 0
    ]

    by_model: dict[str, int] = defaultdict(int)
    by_feature: dict[str, int] = defaultdict(int)
    by_endpoint: dict[str, int] = defaultdict(int)
    by_operation: dict[str, int] = defaultdict(int)
    by_hour: dict[int, int] = defaultdict(int)
    days: dict[str, dict[str, Any]] = {}
    response_times: list[float] = []

    for record in records:
        by_model[record.model] += record.tokens_used
        by_feature[record.feature_area or "unknown"] += record.tokens_used
        by_endpoint[record.endpoint or "unknown"] += record.tokens_used
        by_operation[record.operation_type] += record.tokens_used

        created_at = record.created_at or current_time
        by_hour[created_at.hour] += record.tokens_used
        day = days.setdefault(
            created_at.date().isoformat(),
            {"tokens": 0, "calls": 0, "success": 0, "response_times": []},
        )
        day["tokens"] += record.tokens_used
        day["calls"] += 1
        if record.success:
            day["success"] += 1
        if record.response_time is not None:
            day["response_times"].append(record.response_time)
            response_times.append(record.response_time)

    by_day = [
        {
            "date": date,
            "tokens": day["tokens"],
            "calls": day["calls"],
            "avg_response_time": _average(day["response_times"]) or 0.0,
            "success_rate": day["success"] / day["calls"] if day["calls"] else 1.0,
        }
        for date, day in sorted(days.items())
    ]

    total_calls = len(records)
    return {
        "timeframe": timeframe,
        "total_tokens": sum(record.tokens_used for record in records),
        "total_calls": total_calls,
        "by_model": dict(by_model),
        "by_feature_area": dict(by_feature),
        "by_endpoint": dict(by_endpoint),
        "by_operation_type": dict(by_operation),
        "by_day": by_day,
        "avg_response_time": _average(response_times),
        "success_rate": (
            sum(1 for record in records if record.success) / total_calls
            if total_calls
            else None
        ),
        "peak_hour": max(by_hour, key=by_hour.get) if by_hour else None,
    }


def _average(values: list[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)


__all__ = ["Timeframe", "get_usage_stats"]
