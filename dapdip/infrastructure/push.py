"""Deliver push notifications through the configured HTTP push gateway."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

import httpx

from dapdip.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class PushDeliveryResult:
    """Summary returned by the gateway for one fan-out request."""

    delivered: int
    invalid_tokens: list[str] = field(default_factory=list)


def send_push(
    tokens: Sequence[str],
    *,
    title: str,
    body: str,
    data: dict[str, Any] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> PushDeliveryResult | None:
    """Send one message to every device token.

    Returns ``None`` when the gateway is not configured or the request fails.
    """

    settings = get_settings()
    if not settings.push_gateway_url:
        logger.info("Push gateway not configured; skipping push delivery")
        return None
    if not tokens:
        return PushDeliveryResult(delivered=0)

    headers = {"Content-Type": "application/json"}
    if settings.push_gateway_key:
        headers["Authorization"] = f"Bearer {settings.push_gateway_key}"

    payload = {
        "tokens": list(tokens),
        "notification": {"title": title, "body": body},
        "data": data or {},
    }

    try:
        with httpx.Client(
            timeout=settings.push_timeout_seconds, transport=transport
        ) as client:
            response = client.post(
                settings.push_gateway_url, json=payload, headers=headers
            )
    except httpx.HTTPError as exc:
        logger.error("Push gateway request failed: %s", exc)
        return None

    if response.status_code >= 400:
        logger.error(
            "Push gateway responded with status %s: %s",
            response.status_code,
            response.text[:500],
        )
        return None

    try:
        body_json = response.json()
    except ValueError:
        body_json = {}
    if not isinstance(body_json, dict):
        body_json = {}

    invalid_tokens = [
        str(token) for token in body_json.get("invalid_tokens") or [] if token
    ]
    delivered = body_json.get("delivered")
    if not isinstance(delivered, int):
        delivered = len(tokens) - len(invalid_tokens)
    return PushDeliveryResult(delivered=delivered, invalid_tokens=invalid_tokens)


__all__ = ["PushDeliveryResult", "send_push"]
