import pytest
from httpx import AsyncClient

from tests.utils.auth_flow import login

NEW_PASSWORD = "BrandNewPass789!"


@pytest.mark.asyncio
async def test_full_password_reset(client: AsyncClient, outbox, verified_user, session_tokens):
    """Password Reset

    Given I forgot my password
    When I request a reset and submit the emailed token with a new password
    Then the new password works and the old one does not
    And every existing refresh token is revoked
    And the token cannot be used again
    """
    response = await client.post("/auth/forgot-password", json={"email": verified_user["email"]})
    assert response.status_code == 200
    token = outbox.latest("password_reset", verified_user["email"])

    check = await client.post("/auth/validate-reset-token", json={"token": token})
    assert check.json() == {"valid": True}

    reset = await client.post(
        "/auth/reset-password", json={"token": token, "new_password": NEW_PASSWORD}
    )
    assert reset.status_code == 200
    assert reset.json()["status"] == "reset"

    old = await client.post(
        "/auth/login",
        json={"email": verified_user["email"], "password": verified_user["password"]},
    )
    assert old.status_code == 401
    await login(client, {"email": verified_user["email"], "password": NEW_PASSWORD})

    refresh = await client.post(
        "/auth/refresh", json={"refresh_token": session_tokens["refresh_token"]}
    )
    assert refresh.status_code == 401

    reuse = await client.post(
        "/auth/reset-password", json={"token": token, "new_password": "YetAnother123!"}
    )
    assert reuse.status_code == 400
    assert reuse.json()["error"]["code"] == "INVALID_TOKEN"

    check = await client.post("/auth/validate-reset-token", json={"token": token})
    assert check.json() == {"valid": False}


@pytest.mark.asyncio
async def test_forgot_password_unknown_email(client: AsyncClient, outbox, verified_user):
    """No Enumeration

    When I request a reset for an unknown email
    Then the response is identical to a known email
    And nothing is sent
    """
    known = await client.post("/auth/forgot-password", json={"email": verified_user["email"]})
    unknown = await client.post("/auth/forgot-password", json={"email": "ghost@example.com"})

    assert unknown.status_code == known.status_code == 200
    assert unknown.json() == known.json()
    assert outbox.count("password_reset") == 1


@pytest.mark.asyncio
async def test_only_latest_reset_token_is_accepted(client: AsyncClient, outbox, verified_user):
    await client.post("/auth/forgot-password", json={"email": verified_user["email"]})
    first = outbox.latest("password_reset", verified_user["email"])
    await client.post("/auth/forgot-password", json={"email": verified_user["email"]})
    second = outbox.latest("password_reset", verified_user["email"])

    stale = await client.post(
        "/auth/reset-password", json={"token": first, "new_password": NEW_PASSWORD}
    )
    fresh = await client.post(
        "/auth/reset-password", json={"token": second, "new_password": NEW_PASSWORD}
    )

    assert stale.status_code == 400
    assert fresh.status_code == 200


@pytest.mark.asyncio
async def test_reset_with_weak_password(client: AsyncClient, outbox, verified_user):
    await client.post("/auth/forgot-password", json={"email": verified_user["email"]})
    token = outbox.latest("password_reset", verified_user["email"])

    response = await client.post(
        "/auth/reset-password", json={"token": token, "new_password": "short"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"

    # Token survives a rejected password
    check = await client.post("/auth/validate-reset-token", json={"token": token})
    assert check.json() == {"valid": True}


@pytest.mark.asyncio
async def test_change_password(client: AsyncClient, verified_user, session_tokens, auth_headers):
    """Change Password

    Given I am logged in
    When I change my password with the correct current password
    Then my refresh tokens are revoked and the new password works
    """
    response = await client.post(
        "/auth/change-password",
        headers=auth_headers,
        json={"current_password": verified_user["password"], "new_password": NEW_PASSWORD},
    )

    assert response.status_code == 200
    assert response.json()["revoked_sessions"] == 1

    refresh = await client.post(
        "/auth/refresh", json={"refresh_token": session_tokens["refresh_token"]}
    )
    assert refresh.status_code == 401
    await login(client, {"email": verified_user["email"], "password": NEW_PASSWORD})


@pytest.mark.asyncio
async def test_change_password_wrong_current(client: AsyncClient, auth_headers):
    response = await client.post(
        "/auth/change-password",
        headers=auth_headers,
        json={"current_password": "NotMyPassword!", "new_password": NEW_PASSWORD},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"
