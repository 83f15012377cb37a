import pytest
from httpx import AsyncClient
from jose import jwt

from tests.utils.json_compare import exclude_keys


@pytest.mark.asyncio
async def test_get_current_user(client: AsyncClient, auth_headers, test_data):
    """Current User

    Given I have a valid access token
    When I call /users/me
    Then I receive my account details
    """
    response = await client.get("/users/me", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert exclude_keys(data, {"id", "last_login_at"}) == test_data.get("expected_user_info")
    assert data["last_login_at"] is not None


@pytest.mark.asyncio
async def test_invalid_jwt(client: AsyncClient):
    """Invalid JWT

    Given my access token is malformed
    When I call /users/me
    Then the request fails with 401 INVALID_TOKEN
    """
    response = await client.get("/users/me", headers={"Authorization": "Bearer invalid_token_here"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_missing_jwt(client: AsyncClient):
    response = await client.get("/users/me")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_signed_by_foreign_key(client: AsyncClient, session_tokens, other_rsa_keys):
    """A token with a valid shape and our kid but signed by another key is refused"""
    claims = jwt.get_unverified_claims(session_tokens["access_token"])
    forged = jwt.encode(
        claims,
        other_rsa_keys["private_pkcs8"],
        algorithm="RS256",
        headers={"kid": "integration-key"},
    )

    response = await client.get("/users/me", headers={"Authorization": f"Bearer {forged}"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_hs256_token_is_refused(client: AsyncClient, session_tokens):
    claims = jwt.get_unverified_claims(session_tokens["access_token"])
    forged = jwt.encode(claims, "secret", algorithm="HS256", headers={"kid": "integration-key"})

    response = await client.get("/users/me", headers={"Authorization": f"Bearer {forged}"})

    assert response.status_code == 401
