"""Tests for the token ledger and metered assistant endpoints."""

from __future__ import annotations

from dapdip.application.use_cases.tokens import check_availability, record_usage
from dapdip.infrastructure.openai_client import GeneratedText
from dapdip.interfaces.api.dependencies import get_text_generation_client


class StubTextClient:
    model = "gpt-test"

    def generate(self, prompt: str, *, instructions: str | None = None) -> GeneratedText:
        return GeneratedText(
            text=f"echo: {prompt}",
            model=self.model,
            prompt_tokens=4,
            completion_tokens=3,
            response_time=0.1,
        )


def _use_stub_client(api) -> None:
    api.app.dependency_overrides[get_text_generation_client] = StubTextClient


def test_summary_starts_on_the_free_tier(api, auth, make_user) -> None:
    user = make_user()

    response = api.get("/tokens/", headers=auth(user))

    assert response.status_code == 200
    body = response.json()
    assert body["tier"] == "FREE"
    assert body["limit"] == 150
    assert body["remaining"] == 150


def test_upgrade_changes_the_limit(api, auth, make_user) -> None:
    user = make_user()

    response = api.post(
        "/tokens/upgrade", json={"tier": "BASIC", "bonus_tokens": 50}, headers=auth(user)
    )

    assert response.status_code == 200
    assert response.json()["tier"] == "BASIC"
    assert response.json()["limit"] == 1050
    assert api.post(
        "/tokens/upgrade", json={"tier": "GOLD"}, headers=auth(user)
    ).status_code == 422


def test_usage_stats(api, auth, session, make_user) -> None:
    user = make_user()
    check_availability(session, user.id, 30)
    record_usage(
        session,
        user.id,
        operation_type="CHAT_MESSAGE",
        tokens_used=30,
        model="gpt-test",
        metadata={"feature_area": "assistant"},
    )

    response = api.get("/tokens/usage", params={"timeframe": "week"}, headers=auth(user))

    assert response.status_code == 200
    body = response.json()
    assert body["timeframe"] == "week"
    assert body["total_tokens"] == 30
    assert body["by_model"] == {"gpt-test": 30}
    assert api.get(
        "/tokens/usage", params={"timeframe": "decade"}, headers=auth(user)
    ).status_code == 422


def test_bonus_is_admin_only(api, auth, make_user, publisher) -> None:
    admin = make_user(is_admin=True)
    user = make_user()

    forbidden = api.post("/tokens/bonus", json={"user_id": user.id, "amount": 25}, headers=auth(user))
    granted = api.post(
        "/tokens/bonus",
        json={"user_id": user.id, "amount": 25, "reason": "Contest winner"},
        headers=auth(admin),
    )
    missing = api.post("/tokens/bonus", json={"user_id": 999, "amount": 25}, headers=auth(admin))

    assert forbidden.status_code == 403
    assert granted.status_code == 200
    assert granted.json()["limit"] == 175
    assert granted.json()["bonus_tokens"] == 25
    assert len(publisher.for_user(user.id)) == 1
    assert missing.status_code == 404


def test_assistant_charges_the_caller(api, auth, make_user) -> None:
    user = make_user()
    _use_stub_client(api)

    response = api.post("/assistant/complete", json={"prompt": "Hello there"}, headers=auth(user))

    assert response.status_code == 200
    body = response.json()
    assert body["text"] == "echo: Hello there"
    assert body["tokens_charged"] == 20
    assert body["tokens"]["remaining"] == 130


def test_assistant_rejects_over_budget_requests(api, auth, session, make_user) -> None:
    user = make_user()
    check_availability(session, user.id, 145)
    record_usage(session, user.id, operation_type="CHAT_MESSAGE", tokens_used=145, model="gpt-test")
    _use_stub_client(api)

    response = api.post("/assistant/complete", json={"prompt": "Hello there"}, headers=auth(user))

    assert response.status_code == 403
    assert response.json()["detail"]["code"] == "TOKEN_LIMIT_EXCEEDED"


def test_assistant_requires_openai_configuration(api, auth, make_user) -> None:
    user = make_user()

    response = api.post("/assistant/complete", json={"prompt": "Hello"}, headers=auth(user))

    assert response.status_code == 503
