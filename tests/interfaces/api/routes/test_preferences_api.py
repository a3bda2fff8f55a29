"""Tests for the preference and push device endpoints."""

from __future__ import annotations


def test_read_and_patch_preferences(api, auth, make_user) -> None:
    user = make_user()

    defaults = api.get("/notifications/preferences", headers=auth(user))
    assert defaults.status_code == 200
    assert defaults.json()["in_app_enabled"] is True

    response = api.patch(
        "/notifications/preferences",
        json={"quiet_hours_enabled": True, "timezone": "Europe/Madrid"},
        headers=auth(user),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["quiet_hours_enabled"] is True
    assert body["quiet_hours_start"] == "22:00"
    assert body["timezone"] == "Europe/Madrid"
    assert body["email_enabled"] is False


def test_patch_rejects_malformed_values(api, auth, make_user) -> None:
    user = make_user()

    bad_time = api.patch(
        "/notifications/preferences", json={"quiet_hours_start": "25:00"}, headers=auth(user)
    )
    bad_zone = api.patch(
        "/notifications/preferences", json={"timezone": "Mars/Olympus"}, headers=auth(user)
    )
    unknown_field = api.patch(
        "/notifications/preferences", json={"sms_enabled": True}, headers=auth(user)
    )

    assert bad_time.status_code == 422
    assert bad_zone.status_code == 422
    assert unknown_field.status_code == 422


def test_category_preferences(api, auth, make_user) -> None:
    user = make_user()

    updated = api.put(
        "/notifications/preferences/categories/GROUP",
        json={"push_enabled": False},
        headers=auth(user),
    )
    listing = api.get("/notifications/preferences/categories", headers=auth(user))

    assert updated.status_code == 200
    assert updated.json()["push_enabled"] is False
    assert updated.json()["in_app_enabled"] is True
    by_category = {item["category"]: item for item in listing.json()}
    assert set(by_category) == {"SOCIAL", "GROUP", "PAGE", "SYSTEM", "SECURITY"}
    assert by_category["GROUP"]["push_enabled"] is False
    assert api.put(
        "/notifications/preferences/categories/GAMES", json={}, headers=auth(user)
    ).status_code == 422


def test_group_preferences(api, auth, make_user) -> None:
    user = make_user()

    defaults = api.get("/notifications/preferences/groups/42", headers=auth(user))
    assert defaults.status_code == 200
    assert defaults.json()["mute_all"] is False
    assert defaults.json()["posts_enabled"] is True

    updated = api.put(
        "/notifications/preferences/groups/42",
        json={"announcements_only": True, "polls_enabled": False},
        headers=auth(user),
    )
    assert updated.status_code == 200
    assert updated.json()["group_id"] == 42
    assert updated.json()["announcements_only"] is True
    assert updated.json()["polls_enabled"] is False
    assert updated.json()["posts_enabled"] is True

    stored = api.get("/notifications/preferences/groups/42", headers=auth(user)).json()
    assert stored == updated.json()
    assert api.put(
        "/notifications/preferences/groups/42", json={"likes_enabled": False}, headers=auth(user)
    ).status_code == 422


def test_register_list_and_remove_devices(api, auth, make_user) -> None:
    user = make_user()

    created = api.post(
        "/notifications/devices/",
        json={"token": "device-token-123", "platform": "ANDROID", "name": "Pixel"},
        headers=auth(user),
    )
    assert created.status_code == 201
    device_id = created.json()["id"]

    listing = api.get("/notifications/devices/", headers=auth(user))
    assert [device["id"] for device in listing.json()] == [device_id]

    assert api.delete(f"/notifications/devices/{device_id}", headers=auth(user)).status_code == 204
    assert api.delete(f"/notifications/devices/{device_id}", headers=auth(user)).status_code == 404


def test_devices_belong_to_their_owner(api, auth, make_user) -> None:
    owner = make_user()
    other = make_user()
    device_id = api.post(
        "/notifications/devices/",
        json={"token": "device-token-456", "platform": "IOS"},
        headers=auth(owner),
    ).json()["id"]

    assert api.delete(f"/notifications/devices/{device_id}", headers=auth(other)).status_code == 404
    assert api.get("/notifications/devices/", headers=auth(other)).json() == []
