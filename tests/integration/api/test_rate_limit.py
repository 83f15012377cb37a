import pytest
from httpx import AsyncClient

from auth_service.app.services.counter_store import ICounterStore
from auth_service.app.services.rate_limiter import RateLimiter, RateLimitRule


class UnavailableStore(ICounterStore):
    async def increment(self, key, ttl_seconds):
        raise ConnectionError("cache unavailable")

    async def get(self, key):
        raise ConnectionError("cache unavailable")

    async def delete(self, key):
        raise ConnectionError("cache unavailable")


@pytest.mark.asyncio
async def test_login_rate_limit(client: AsyncClient, app):
    """Login Rate Limit

    Given the login limit is 3 requests per window
    When one client sends a 4th login
    Then it is refused with 429 before credentials are checked
    And another client is unaffected
    """
    app.state.rate_limits["login"] = RateLimitRule(limit=3, window_seconds=300)
    body = {"email": "ghost@example.com", "password": "WrongPassword!"}

    codes = [(await client.post("/auth/login", json=body)).status_code for _ in range(4)]
    other = await client.post(
        "/auth/login", json=body, headers={"X-Forwarded-For": "198.51.100.23"}
    )

    assert codes == [401, 401, 401, 429]
    assert other.status_code == 401


@pytest.mark.asyncio
async def test_register_rate_limit(client: AsyncClient, app, test_data):
    app.state.rate_limits["register"] = RateLimitRule(limit=1, window_seconds=3600)
    first = test_data.get_copy("user")
    second = test_data.get_copy("second_user")

    assert (await client.post("/auth/register", json=first)).status_code == 201
    response = await client.post("/auth/register", json=second)

    assert response.status_code == 429
    assert response.json()["error"]["code"] == "RATE_LIMIT_EXCEEDED"


@pytest.mark.asyncio
async def test_rate_limiter_fails_open(client: AsyncClient, app, test_data):
    """When the counter store is down, requests are allowed through"""
    app.state.rate_limits["register"] = RateLimitRule(limit=1, window_seconds=3600)
    app.state.rate_limiter = RateLimiter(UnavailableStore())

    first = await client.post("/auth/register", json=test_data.get_copy("user"))
    second = await client.post("/auth/register", json=test_data.get_copy("second_user"))

    assert first.status_code == 201
    assert second.status_code == 201


@pytest.mark.asyncio
async def test_admin_can_inspect_and_reset_window(client: AsyncClient, app, admin_headers):
    """Rate Limit Administration

    Given a client has exhausted its login window
    When an administrator resets that client's counter
    Then the client can log in again
    """
    app.state.rate_limits["login"] = RateLimitRule(limit=1, window_seconds=300)
    body = {"email": "ghost@example.com", "password": "WrongPassword!"}
    await client.post("/auth/login", json=body)
    assert (await client.post("/auth/login", json=body)).status_code == 429

    status = await client.get("/admin/rate-limits/login/127.0.0.1", headers=admin_headers)
    assert status.json() == {"prefix": "login", "identifier": "127.0.0.1", "count": 2}

    reset = await client.delete("/admin/rate-limits/login/127.0.0.1", headers=admin_headers)
    assert reset.status_code == 204

    assert (await client.post("/auth/login", json=body)).status_code == 401
