import asyncio

import pytest
from httpx import AsyncClient
from sqlmodel import select

from auth_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from auth_service.app.services.refresh_token_store import RefreshTokenStore, hash_token
from auth_service.domain.entities import RefreshToken, RevocationReason
from tests.utils.auth_flow import bearer


@pytest.mark.asyncio
async def test_refresh_rotates_token(client: AsyncClient, session_tokens):
    """Refresh Rotation

    Given I hold refresh token R1
    When I exchange R1
    Then I receive a new access token and refresh token R2
    And R1 can never be used again
    And R2 works
    """
    r1 = session_tokens["refresh_token"]

    response = await client.post("/auth/refresh", json={"refresh_token": r1})
    assert response.status_code == 200
    r2 = response.json()["refresh_token"]
    assert r2 != r1
    assert response.json()["access_token"]

    reuse = await client.post("/auth/refresh", json={"refresh_token": r1})
    assert reuse.status_code == 401
    assert reuse.json()["error"]["code"] == "INVALID_TOKEN"

    again = await client.post("/auth/refresh", json={"refresh_token": r2})
    assert again.status_code == 200


@pytest.mark.asyncio
async def test_refresh_unknown_token(client: AsyncClient):
    response = await client.post("/auth/refresh", json={"refresh_token": "made-up"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_refresh_tokens_are_stored_hashed(session_tokens, db_session):
    r1 = session_tokens["refresh_token"]

    result = await db_session.exec(select(RefreshToken))
    rows = list(result.all())

    assert len(rows) == 1
    assert rows[0].token_hash == hash_token(r1)
    assert rows[0].token_hash != r1


@pytest.mark.asyncio
async def test_logout_revokes_refresh_tokens(client: AsyncClient, session_tokens):
    """Logout

    Given I am logged in
    When I log out
    Then my refresh token is revoked
    And my access token keeps working until it expires
    """
    headers = bearer(session_tokens["access_token"])

    response = await client.post("/auth/logout", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"status": "logged_out", "revoked_sessions": 1}

    refresh = await client.post(
        "/auth/refresh", json={"refresh_token": session_tokens["refresh_token"]}
    )
    assert refresh.status_code == 401

    me = await client.get("/users/me", headers=headers)
    assert me.status_code == 200

    # Idempotent
    second = await client.post("/auth/logout", headers=headers)
    assert second.json()["revoked_sessions"] == 0


@pytest.mark.asyncio
async def test_logout_requires_access_token(client: AsyncClient):
    response = await client.post("/auth/logout")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_concurrent_rotation_has_single_winner(session_tokens, session_factory):
    """Two rotations of the same token race; exactly one may succeed"""
    r1 = session_tokens["refresh_token"]

    async def rotate():
        async with session_factory() as session:
            async with SqlAlchemyUnitOfWork(session) as uow:
                rotated = await RefreshTokenStore(uow).validate_and_rotate(r1)
                if rotated is not None:
                    await uow.commit()
                return rotated

    results = await asyncio.gather(rotate(), rotate())

    winners = [r for r in results if r is not None]
    assert len(winners) == 1

    async with session_factory() as session:
        result = await session.exec(
            select(RefreshToken).where(RefreshToken.token_hash == hash_token(r1))
        )
        original = result.one()
    assert original.revoked is True
    assert original.revoked_reason == RevocationReason.rotated
