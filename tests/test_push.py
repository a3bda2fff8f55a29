"""Tests for the HTTP push gateway client."""

from __future__ import annotations

import json

import httpx
import pytest

from dapdip.infrastructure import push as push_module


class GatewaySettings:
    push_gateway_url = "https://push.test/send"
    push_gateway_key = "server-key"
    push_timeout_seconds = 2.0


@pytest.fixture()
def gateway(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(push_module, "get_settings", lambda: GatewaySettings())


def test_push_is_skipped_without_gateway(monkeypatch: pytest.MonkeyPatch) -> None:
    class NoGateway(GatewaySettings):
        push_gateway_url = None

    monkeypatch.setattr(push_module, "get_settings", lambda: NoGateway())

    assert push_module.send_push(["token-1"], title="Hi", body="There") is None


def test_push_posts_every_token(gateway) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"delivered": 1, "invalid_tokens": ["token-2"]})

    result = push_module.send_push(
        ["token-1", "token-2"],
        title="DapDip",
        body="Alice liked your post",
        data={"notification_id": 4},
        transport=httpx.MockTransport(handler),
    )

    assert result == push_module.PushDeliveryResult(delivered=1, invalid_tokens=["token-2"])
    (request,) = requests
    assert request.headers["Authorization"] == "Bearer server-key"
    payload = json.loads(request.content)
    assert payload["tokens"] == ["token-1", "token-2"]
    assert payload["notification"] == {"title": "DapDip", "body": "Alice liked your post"}
    assert payload["data"] == {"notification_id": 4}


def test_delivered_defaults_to_valid_tokens(gateway) -> None:
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"invalid_tokens": ["token-3"]})
    )

    result = push_module.send_push(
        ["token-1", "token-2", "token-3"], title="t", body="b", transport=transport
    )

    assert result.delivered == 2


def test_gateway_errors_return_none(gateway, caplog) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text="unavailable"))

    with caplog.at_level("ERROR"):
        result = push_module.send_push(["token-1"], title="t", body="b", transport=transport)

    assert result is None
    assert "status 503" in caplog.text


def test_network_failures_return_none(gateway) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    result = push_module.send_push(
        ["token-1"], title="t", body="b", transport=httpx.MockTransport(handler)
    )

    assert result is None


def test_no_tokens_means_nothing_to_send(gateway) -> None:
    assert push_module.send_push([], title="t", body="b") == push_module.PushDeliveryResult(
        delivered=0
    )
